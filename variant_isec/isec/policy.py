from ..config import OpKind, SetOperation


def popcount(bitmask: int) -> int:
    return bin(bitmask).count("1")


def decide(n: int, total: int, op: SetOperation, legacy: bool = False) -> bool:
    """
    Decide whether a locus present in n of total streams is retained.

    EQUAL keeps n == k, AT_LEAST keeps n >= k and AT_MOST keeps n <= k. A k
    outside [1, total] is not an error; it just never (or always) matches.

    With legacy=True the historical nested conditionals are reproduced: EQUAL
    keeps only loci present in every stream (n == total, k is ignored) and
    AT_LEAST / AT_MOST retain every locus.
    """
    if legacy:
        return n == total if op.kind is OpKind.EQUAL else True
    if op.kind is OpKind.EQUAL:
        return n == op.n
    if op.kind is OpKind.AT_LEAST:
        return n >= op.n
    return n <= op.n
