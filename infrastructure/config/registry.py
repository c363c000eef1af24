from domain.encodings import (
    OneMinusOne,
    OneTwo,
    OneVsOne,
    OneVsRest,
    OneZero,
    RestVsOne,
    TwoClassEncoding,
)

from .models import EncodingKind

# Encoding kind -> encoding class
ENCODING_BY_KIND: dict[EncodingKind, type[TwoClassEncoding]] = {
    EncodingKind.ONE_ZERO: OneZero,
    EncodingKind.ONE_MINUS_ONE: OneMinusOne,
    EncodingKind.ONE_TWO: OneTwo,
    EncodingKind.ONE_VS_ONE: OneVsOne,
    EncodingKind.ONE_VS_REST: OneVsRest,
    EncodingKind.REST_VS_ONE: RestVsOne,
}
