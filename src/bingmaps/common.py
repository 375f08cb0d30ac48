"""Types shared by every Bing Maps endpoint."""

from __future__ import annotations

from enum import Enum


class CultureCode(str, Enum):
    """Culture used to localize labels and address formats in responses.

    Values are the culture codes accepted by the ``c`` query parameter.
    """

    AF = "af"
    AR_SA = "ar-sa"
    BG = "bg"
    CA = "ca"
    CS = "cs"
    DA = "da"
    DE = "de"
    DE_DE = "de-de"
    EL = "el"
    EN_GB = "en-GB"
    EN_US = "en-US"
    ES = "es"
    ES_ES = "es-ES"
    ES_MX = "es-MX"
    ES_US = "es-US"
    ET = "et"
    EU = "eu"
    FI = "fi"
    FIL = "fil-Latn"
    FR = "fr"
    FR_CA = "fr-CA"
    FR_FR = "fr-FR"
    GA = "ga"
    GL = "gl"
    HE = "he"
    HI = "hi"
    HR = "hr"
    HU = "hu"
    ID = "id"
    IS = "is"
    IT = "it"
    IT_IT = "it-it"
    JA = "ja"
    KO = "ko"
    LT = "lt"
    LV = "lv"
    MS = "ms"
    NB = "nb"
    NL = "nl"
    NL_BE = "nl-BE"
    NN = "nn"
    PL = "pl"
    PT_BR = "pt-BR"
    PT_PT = "pt-PT"
    RO = "ro"
    RU = "ru"
    SK = "sk"
    SL = "sl"
    SR_CYRL_RS = "sr-Cyrl-RS"
    SR_LATN_RS = "sr-Latn-RS"
    SV = "sv"
    TH = "th"
    TR = "tr"
    UK = "uk"
    VI = "vi"
    ZH_HANS = "zh-Hans"
    ZH_HANT = "zh-Hant"

    def __str__(self) -> str:
        return self.value


__all__ = ["CultureCode"]
