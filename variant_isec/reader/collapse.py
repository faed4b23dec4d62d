from enum import Enum
from ..config import CollapsePolicy


class VariantClass(Enum):
    REF = "ref"
    SNP = "snp"
    MNP = "mnp"
    INDEL = "indel"
    OTHER = "other"


def is_symbolic(allele: str) -> bool:
    return allele.startswith("<") or allele in ("*", ".") or "[" in allele or "]" in allele


def classify(record) -> VariantClass:
    """
    Classify a record by its alleles. A record is a SNP only if REF and every
    ALT are single bases; any length-changing ALT makes it an indel.
    """
    ref = record.ref or ""
    alts = record.alts or ()
    if not alts:
        return VariantClass.REF

    concrete = [alt for alt in alts if not is_symbolic(alt)]
    if not concrete:
        return VariantClass.OTHER
    if any(len(alt) != len(ref) for alt in concrete):
        return VariantClass.INDEL
    if len(ref) == 1:
        return VariantClass.SNP
    return VariantClass.MNP


def same_alleles(a, b) -> bool:
    return a.ref == b.ref and tuple(a.alts or ()) == tuple(b.alts or ())


def records_match(a, b, collapse: CollapsePolicy) -> bool:
    """Whether two records at the same position belong to the same site."""
    if collapse is CollapsePolicy.ANY:
        return True
    if same_alleles(a, b):
        return True
    if collapse is CollapsePolicy.NONE:
        return False

    class_a, class_b = classify(a), classify(b)
    if class_a is not class_b:
        return False
    if class_a is VariantClass.SNP:
        return collapse in (CollapsePolicy.SNPS, CollapsePolicy.BOTH)
    if class_a is VariantClass.INDEL:
        return collapse in (CollapsePolicy.INDELS, CollapsePolicy.BOTH)
    return False
