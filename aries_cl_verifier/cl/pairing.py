"""BN254 group arithmetic and text encodings for non-revocation proofs."""

from typing import Sequence, Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    Z1,
    Z2,
    add,
    b,
    b2,
    curve_order,
    eq,
    field_modulus,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    normalize,
    pairing,
)

from ..core.error import InvalidStructure

GROUP_ORDER = curve_order
FIELD_BYTES = 32

G1_BYTES = 2 * FIELD_BYTES
G2_BYTES = 4 * FIELD_BYTES
GT_BYTES = 12 * FIELD_BYTES

PointG1 = Tuple[FQ, FQ, FQ]
PointG2 = Tuple[FQ2, FQ2, FQ2]

G1_INFINITY = Z1
G2_INFINITY = Z2


def scalar(value: int) -> int:
    """Reduce an integer into the scalar field."""
    return value % curve_order


def point_add(p1, p2):
    """Add two points of the same group."""
    return add(p1, p2)


def point_neg(pt):
    """Negate a point."""
    return neg(pt)


def point_mul(pt, k: int):
    """Multiply a point by a scalar, reduced modulo the group order."""
    return multiply(pt, scalar(k))


def point_sum(*terms):
    """Sum (point, scalar) pairs of one group."""
    total = None
    for pt, k in terms:
        term = point_mul(pt, k)
        total = term if total is None else add(total, term)
    return total


def point_eq(p1, p2) -> bool:
    """Compare points given in projective coordinates."""
    return eq(p1, p2)


def pair(p: PointG1, q: PointG2) -> FQ12:
    """Optimal ate pairing e(p, q)."""
    return pairing(q, p)


def gt_one() -> FQ12:
    """Identity of the target group."""
    return FQ12.one()


def gt_pow(x: FQ12, k: int) -> FQ12:
    """Exponentiate a target group element, exponent reduced modulo the order."""
    return x ** scalar(k)


def gt_inv(x: FQ12) -> FQ12:
    """Invert a target group element."""
    return x.inv()


def gt_prod(*terms) -> FQ12:
    """Multiply (element, exponent) pairs of the target group."""
    total = FQ12.one()
    for x, k in terms:
        total = total * gt_pow(x, k)
    return total


def _coordinates(text: str, count: int, label: str) -> Sequence[int]:
    if not isinstance(text, str):
        raise InvalidStructure(f"{label} must be a string, got {type(text)}")
    parts = text.split(" ")
    if len(parts) != count:
        raise InvalidStructure(f"{label} must have {count} coordinates")
    try:
        coords = [int(part, 16) for part in parts]
    except ValueError as err:
        raise InvalidStructure(f"{label} has a non-hex coordinate") from err
    if any(c < 0 or c >= field_modulus for c in coords):
        raise InvalidStructure(f"{label} coordinate outside the base field")
    return coords


def decode_g1(text: str, label: str = "G1 point") -> PointG1:
    """
    Parse an affine G1 point from two hex coordinates.

    Raises:
        InvalidStructure: if the text is malformed or the point is not on the curve

    """
    x, y = _coordinates(text, 2, label)
    pt = (FQ(x), FQ(y), FQ.one())
    if not is_on_curve(pt, b):
        raise InvalidStructure(f"{label} is not on the curve")
    return pt


def decode_g2(text: str, label: str = "G2 point") -> PointG2:
    """
    Parse an affine G2 point from four hex coordinates.

    Raises:
        InvalidStructure: if the text is malformed, the point is not on the
            twisted curve or it lies outside the prime-order subgroup

    """
    x0, x1, y0, y1 = _coordinates(text, 4, label)
    pt = (FQ2([x0, x1]), FQ2([y0, y1]), FQ2.one())
    if not is_on_curve(pt, b2):
        raise InvalidStructure(f"{label} is not on the twisted curve")
    if not is_inf(multiply(pt, curve_order)):
        raise InvalidStructure(f"{label} is not in the prime-order subgroup")
    return pt


def decode_gt(text: str, label: str = "GT element") -> FQ12:
    """
    Parse a target group element from twelve hex coefficients.

    Raises:
        InvalidStructure: if the text is malformed or the element does not
            have the group order

    """
    x = FQ12(_coordinates(text, 12, label))
    if x ** curve_order != FQ12.one():
        raise InvalidStructure(f"{label} is not in the target group")
    return x


def _affine(pt) -> Tuple:
    if is_inf(pt):
        raise ValueError("Point at infinity has no affine encoding")
    return normalize(pt)


def encode_g1(pt: PointG1) -> str:
    """Render a G1 point as two upper-case hex coordinates."""
    x, y = _affine(pt)
    return f"{x.n:X} {y.n:X}"


def encode_g2(pt: PointG2) -> str:
    """Render a G2 point as four upper-case hex coordinates."""
    x, y = _affine(pt)
    return " ".join(f"{c:X}" for c in (*x.coeffs, *y.coeffs))


def encode_gt(x: FQ12) -> str:
    """Render a target group element as twelve upper-case hex coefficients."""
    return " ".join(f"{c:X}" for c in x.coeffs)


def _field_bytes(values) -> bytes:
    return b"".join(int(v).to_bytes(FIELD_BYTES, "big") for v in values)


def g1_to_bytes(pt: PointG1) -> bytes:
    """Fixed-width affine encoding; the point at infinity is all zeros."""
    if is_inf(pt):
        return bytes(G1_BYTES)
    x, y = normalize(pt)
    return _field_bytes((x.n, y.n))


def g2_to_bytes(pt: PointG2) -> bytes:
    """Fixed-width affine encoding; the point at infinity is all zeros."""
    if is_inf(pt):
        return bytes(G2_BYTES)
    x, y = normalize(pt)
    return _field_bytes((*x.coeffs, *y.coeffs))


def gt_to_bytes(x: FQ12) -> bytes:
    """Fixed-width encoding of the twelve coefficients."""
    return _field_bytes(x.coeffs)
