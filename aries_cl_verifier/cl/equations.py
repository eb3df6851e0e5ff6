"""
Recompute prover commitments from proof responses.

Primary proofs live in the multiplicative group modulo the issuer's RSA
modulus n; responses there are integers `x^ = x~ + c*x`. Non-revocation
proofs live in the BN254 pairing groups; responses there are scalars
`x^ = x~ - c*x mod q`. Either way the verifier recovers the prover's
commitments `x~` only if every response is consistent with the challenge.
"""

import logging
from collections import namedtuple
from typing import Iterable, List, Mapping, Tuple, Union

from ..core.error import InvalidStructure
from ..messaging.util import canon
from . import pairing
from .constants import (
    C_LIST_G1_KEYS,
    C_LIST_G2_KEYS,
    C_LIST_KEYS,
    DELTA,
    ITERATION,
    LARGE_E_START,
    MAX_E_RESPONSE_BITS,
    MAX_M_RESPONSE_BITS,
    MAX_U_RESPONSE_BITS,
    X_LIST_KEYS,
)
from .models.proof import NonRevocProof, PrimaryProof
from .models.public_key import (
    CredentialPrimaryPublicKey,
    CredentialRevocationPublicKey,
    PrimaryKeyValues,
)
from .models.revocation import RevocationKeyPublic, RevocationRegistry
from .predicate import Predicate
from .transcript import CommitmentValue, modulus_width
from .util import bounded_int, decimal_int, group_element, mod_inverse

LOGGER = logging.getLogger(__name__)

U_KEYS = tuple(str(i) for i in range(ITERATION))
R_KEYS = U_KEYS + (DELTA,)
T_KEYS = R_KEYS

ParsedEqProof = namedtuple("ParsedEqProof", "revealed_attrs a_prime e v m m2")
ParsedGEProof = namedtuple(
    "ParsedGEProof", "attr_name predicate value u r mj alpha t"
)
ParsedPrimaryProof = namedtuple("ParsedPrimaryProof", "eq_proof ge_proofs")
ParsedNonRevocProof = namedtuple("ParsedNonRevocProof", "x_list c_list")


def _mapping(value, label: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidStructure(f"{label} must be a mapping")
    return value


def _exact_keys(value, expected: Iterable[str], label: str) -> Mapping:
    value = _mapping(value, label)
    expected = set(expected)
    if set(value) != expected:
        missing = sorted(expected - set(value))
        extra = sorted(set(value) - expected)
        raise InvalidStructure(
            f"{label} keys mismatch: missing {missing}, extra {extra}"
        )
    return value


def _require_eq_proof(primary_proof):
    if not isinstance(primary_proof, PrimaryProof) or primary_proof.eq_proof is None:
        raise InvalidStructure("Missing primary equality proof")


def parse_predicate(pred) -> Tuple[str, Predicate, int]:
    """
    Parse the predicate a range proof claims to prove.

    Returns:
        canonical attribute name, predicate type and integer threshold

    Raises:
        InvalidStructure: for a missing predicate, unknown type or bad threshold

    """
    if pred is None:
        raise InvalidStructure("Range proof without predicate")
    p_type = Predicate.get(pred.p_type) if isinstance(pred.p_type, str) else None
    if not p_type:
        raise InvalidStructure(f"Unknown predicate type {pred.p_type!r}")
    if isinstance(pred.value, bool):
        raise InvalidStructure("Predicate value must be an integer")
    try:
        value = Predicate.to_int(pred.value)
    except ValueError as err:
        raise InvalidStructure("Predicate value must be an integer") from err
    value = decimal_int(value, "Predicate value", signed=True)
    if not isinstance(pred.attr_name, str) or not canon(pred.attr_name):
        raise InvalidStructure("Predicate attribute name must be non-empty")
    return canon(pred.attr_name), p_type, value


class VerificationEquationEngine:
    """
    Stateless evaluator of the verification equations.

    Every method is a pure function of its arguments. Structural problems
    raise `InvalidStructure` before any group arithmetic; a cryptographically
    wrong proof simply yields commitments that do not hash to its challenge.
    """

    @staticmethod
    def _primary_values(p_pub_key) -> PrimaryKeyValues:
        if isinstance(p_pub_key, PrimaryKeyValues):
            return p_pub_key
        if not isinstance(p_pub_key, CredentialPrimaryPublicKey):
            raise InvalidStructure("Missing primary public key")
        return p_pub_key.values()

    def _parsed_non_revocation(self, non_revoc_proof) -> ParsedNonRevocProof:
        if isinstance(non_revoc_proof, ParsedNonRevocProof):
            return non_revoc_proof
        return self.check_non_revocation_structure(non_revoc_proof)

    def check_primary_structure(
        self, p_pub_key, primary_proof: PrimaryProof, hidden_attrs: Iterable[str]
    ) -> ParsedPrimaryProof:
        """
        Parse and range-check every value of a primary proof.

        Args:
            p_pub_key: issuer primary public key
            primary_proof: the proof to check
            hidden_attrs: names of the attributes the proof must keep hidden

        Returns:
            ParsedPrimaryProof holding Python integers

        Raises:
            InvalidStructure: on any malformed, out-of-range or missing value

        """
        key = self._primary_values(p_pub_key)
        n = key.n
        _require_eq_proof(primary_proof)
        eq = primary_proof.eq_proof

        revealed = {}
        for attr, raw in _mapping(eq.revealed_attrs, "revealed_attrs").items():
            name = canon(attr)
            if name not in key.r:
                raise InvalidStructure(f"No public key base for revealed attr {name}")
            if name in revealed:
                raise InvalidStructure(f"Revealed attr {name} given more than once")
            revealed[name] = decimal_int(raw, f"revealed attr {name}", signed=True)

        hidden = {canon(attr) for attr in hidden_attrs}
        m_raw = _mapping(eq.m, "m")
        m = {}
        for attr, raw in m_raw.items():
            m[canon(attr)] = bounded_int(raw, f"m[{attr}]", MAX_M_RESPONSE_BITS)
        if set(m) != hidden or len(m) != len(m_raw):
            raise InvalidStructure(
                f"Hidden attribute responses {sorted(m)} do not match {sorted(hidden)}"
            )
        for attr in hidden:
            if attr not in key.r:
                raise InvalidStructure(f"No public key base for hidden attr {attr}")

        parsed_eq = ParsedEqProof(
            revealed_attrs=revealed,
            a_prime=group_element(eq.a_prime, "a_prime", n),
            e=bounded_int(eq.e, "e", MAX_E_RESPONSE_BITS),
            v=decimal_int(eq.v, "v"),
            m=m,
            m2=bounded_int(eq.m2, "m2", MAX_M_RESPONSE_BITS),
        )

        ge_proofs = []
        for ge in primary_proof.ge_proofs or ():
            attr_name, p_type, value = parse_predicate(ge.predicate)
            if attr_name not in hidden:
                raise InvalidStructure(f"Predicate over non-hidden attr {attr_name}")

            u = _exact_keys(ge.u, U_KEYS, "u")
            r = _exact_keys(ge.r, R_KEYS, "r")
            t = _exact_keys(ge.t, T_KEYS, "t")
            ge_proofs.append(
                ParsedGEProof(
                    attr_name=attr_name,
                    predicate=p_type,
                    value=value,
                    u={
                        k: bounded_int(u[k], f"u[{k}]", MAX_U_RESPONSE_BITS)
                        for k in U_KEYS
                    },
                    r={k: decimal_int(r[k], f"r[{k}]") for k in R_KEYS},
                    mj=bounded_int(ge.mj, "mj", MAX_M_RESPONSE_BITS),
                    alpha=decimal_int(ge.alpha, "alpha"),
                    t={k: group_element(t[k], f"t[{k}]", n) for k in T_KEYS},
                )
            )

        return ParsedPrimaryProof(eq_proof=parsed_eq, ge_proofs=ge_proofs)

    def recompute_primary_commitment(
        self,
        p_pub_key,
        primary_proof: Union[PrimaryProof, ParsedPrimaryProof],
        hidden_attrs: Iterable[str],
        c_hash: int,
    ) -> List[CommitmentValue]:
        """
        Recompute the equality tau, then six taus per range proof.

        Args:
            p_pub_key: issuer primary public key
            primary_proof: the proof, or its form already parsed by
                `check_primary_structure`
            hidden_attrs: names of the attributes the proof keeps hidden
            c_hash: the challenge embedded in the proof

        Returns:
            commitments in transcript order, each as wide as the modulus

        """
        key = self._primary_values(p_pub_key)
        if isinstance(primary_proof, ParsedPrimaryProof):
            parsed = primary_proof
        else:
            parsed = self.check_primary_structure(key, primary_proof, hidden_attrs)
        n = key.n
        width = modulus_width(n)

        taus = [self._eq_tau(key, parsed.eq_proof, c_hash)]
        for ge in parsed.ge_proofs:
            taus.extend(self._ge_taus(key, ge, c_hash))
        return [CommitmentValue.from_int(tau, width) for tau in taus]

    @staticmethod
    def _eq_tau(key: PrimaryKeyValues, eq: ParsedEqProof, c_hash: int) -> int:
        n = key.n
        t1 = pow(eq.a_prime, eq.e, n)
        for attr, m in eq.m.items():
            t1 = t1 * pow(key.r[attr], m, n) % n
        t1 = t1 * pow(key.s, eq.v, n) % n
        t1 = t1 * pow(key.rctxt, eq.m2, n) % n

        rar = pow(eq.a_prime, 1 << LARGE_E_START, n)
        for attr, encoded in eq.revealed_attrs.items():
            rar = rar * pow(key.r[attr], encoded, n) % n
        t2 = pow(rar * mod_inverse(key.z, n, "Z") % n, c_hash, n)

        return t1 * t2 % n

    @staticmethod
    def _ge_taus(key: PrimaryKeyValues, ge: ParsedGEProof, c_hash: int) -> List[int]:
        n, z, s = key.n, key.z, key.s
        taus = []
        for k in U_KEYS:
            t_inv = mod_inverse(ge.t[k], n, f"t[{k}]")
            taus.append(
                pow(z, ge.u[k], n) * pow(s, ge.r[k], n) * pow(t_inv, c_hash, n) % n
            )

        delta = ge.t[DELTA]
        delta_prime = ge.predicate.delta_prime(ge.value)
        if ge.predicate.is_less:
            delta_predicate = mod_inverse(delta, n, "t[DELTA]")
            s_r_delta = pow(mod_inverse(s, n, "S"), ge.r[DELTA], n)
        else:
            delta_predicate = delta
            s_r_delta = pow(s, ge.r[DELTA], n)
        z_delta = pow(z, delta_prime, n) * delta_predicate % n
        taus.append(
            pow(z, ge.mj, n)
            * s_r_delta
            * pow(mod_inverse(z_delta, n, "Z^delta"), c_hash, n)
            % n
        )

        q = 1
        for k in U_KEYS:
            q = q * pow(ge.t[k], ge.u[k], n) % n
        q = q * pow(s, ge.alpha, n) % n
        taus.append(q * pow(mod_inverse(delta, n, "t[DELTA]"), c_hash, n) % n)

        return taus

    def primary_c_list(
        self, p_pub_key, primary_proof: Union[PrimaryProof, ParsedPrimaryProof]
    ) -> List[CommitmentValue]:
        """
        Collect the commitments a primary proof carries.

        Returns:
            `A'`, then `T_0..T_3, T_DELTA` for each range proof

        """
        key = self._primary_values(p_pub_key)
        n = key.n
        width = modulus_width(n)
        if isinstance(primary_proof, ParsedPrimaryProof):
            values = [primary_proof.eq_proof.a_prime]
            for ge in primary_proof.ge_proofs:
                values.extend(ge.t[k] for k in T_KEYS)
            return [CommitmentValue.from_int(value, width) for value in values]

        _require_eq_proof(primary_proof)
        values = [group_element(primary_proof.eq_proof.a_prime, "a_prime", n)]
        for ge in primary_proof.ge_proofs or ():
            t = _exact_keys(ge.t, T_KEYS, "t")
            values.extend(group_element(t[k], f"t[{k}]", n) for k in T_KEYS)
        return [CommitmentValue.from_int(value, width) for value in values]

    def check_predicate_links(self, primary_proof: PrimaryProof) -> bool:
        """
        Check each range proof works on the value the equality proof hides.

        Returns:
            whether every `mj` equals the equality proof's response for its attribute

        """
        eq_m = {
            canon(attr): decimal_int(raw, f"m[{attr}]")
            for attr, raw in _mapping(primary_proof.eq_proof.m, "m").items()
        }
        for ge in primary_proof.ge_proofs or ():
            attr = canon(ge.predicate.attr_name)
            if attr not in eq_m or decimal_int(ge.mj, "mj") != eq_m[attr]:
                LOGGER.debug("Range proof over %s not linked to equality proof", attr)
                return False
        return True

    def check_non_revocation_structure(
        self, non_revoc_proof: NonRevocProof
    ) -> ParsedNonRevocProof:
        """
        Parse the scalars and decode the points of a non-revocation proof.

        Raises:
            InvalidStructure: on missing, extra, out-of-range or off-curve values

        """
        if not isinstance(non_revoc_proof, NonRevocProof):
            raise InvalidStructure("Missing non-revocation proof")
        x_raw = _exact_keys(non_revoc_proof.x_list, X_LIST_KEYS, "x_list")
        c_raw = _exact_keys(non_revoc_proof.c_list, C_LIST_KEYS, "c_list")

        x_list = {}
        for name in X_LIST_KEYS:
            x_list[name] = decimal_int(x_raw[name], name)
            if x_list[name] >= pairing.GROUP_ORDER:
                raise InvalidStructure(f"{name} is not reduced modulo the group order")
        c_list = {}
        for name in C_LIST_G1_KEYS:
            c_list[name] = pairing.decode_g1(c_raw[name], name)
        for name in C_LIST_G2_KEYS:
            c_list[name] = pairing.decode_g2(c_raw[name], name)
        return ParsedNonRevocProof(x_list=x_list, c_list=c_list)

    def recompute_non_revocation_commitment(
        self,
        r_pub_key: CredentialRevocationPublicKey,
        rev_reg: RevocationRegistry,
        rev_key_pub: RevocationKeyPublic,
        non_revoc_proof: Union[NonRevocProof, ParsedNonRevocProof],
        c_hash: int,
    ) -> List[CommitmentValue]:
        """
        Recompute the eight non-revocation taus.

        Each tau is `expected^c * calc(x^)`, where `calc` is the left side of
        one accumulator equation evaluated on the responses and `expected`
        the public value it equals for an honest prover.

        Returns:
            taus in transcript order: G1, G1, GT, GT, G1, G1, GT, GT

        """
        parsed = self._parsed_non_revocation(non_revoc_proof)
        key = r_pub_key.values()
        accum = rev_reg.value()
        z = rev_key_pub.value()
        x = parsed.x_list
        cl = parsed.c_list
        c = pairing.scalar(c_hash)

        add, neg, mul, point_sum = (
            pairing.point_add,
            pairing.point_neg,
            pairing.point_mul,
            pairing.point_sum,
        )
        pair, gt_inv, gt_pow, gt_prod = (
            pairing.pair,
            pairing.gt_inv,
            pairing.gt_pow,
            pairing.gt_prod,
        )
        e, d, a, g_cap = cl["e"], cl["d"], cl["a"], cl["g"]
        w, s, u_cap = cl["w"], cl["s"], cl["u"]

        htilde_h_cap = pair(key.htilde, key.h_cap)
        neg_g_h_cap = pair(neg(key.g), key.h_cap)
        pk_g = add(key.pk, g_cap)

        t1 = add(mul(e, c), point_sum((key.h, x["rho"]), (key.htilde, x["o"])))
        t2 = point_sum((e, x["c"]), (key.h, -x["m"]), (key.htilde, -x["t"]))

        expected3 = pair(add(key.h0, g_cap), key.h_cap) * gt_inv(pair(a, key.y))
        calc3 = gt_prod(
            (pair(a, key.h_cap), x["c"]), (htilde_h_cap, x["r"])
        ) * gt_inv(
            gt_prod(
                (pair(key.htilde, key.y), x["rho"]),
                (htilde_h_cap, x["m"]),
                (pair(key.h1, key.h_cap), x["m2"]),
                (pair(key.h2, key.h_cap), x["s"]),
            )
        )
        t3 = gt_pow(expected3, c) * calc3

        expected4 = pair(g_cap, accum) * gt_inv(pair(key.g, w) * z)
        calc4 = gt_prod(
            (pair(key.htilde, accum), x["r"]), (neg_g_h_cap, x["r_prime"])
        )
        t4 = gt_pow(expected4, c) * calc4

        t5 = add(mul(d, c), point_sum((key.g, x["r"]), (key.htilde, x["o_prime"])))
        t6 = point_sum(
            (d, x["r_prime_prime"]),
            (key.g, -x["m_prime"]),
            (key.htilde, -x["t_prime"]),
        )

        expected7 = pair(pk_g, s) * gt_inv(pair(key.g, key.g_dash))
        calc7 = gt_prod(
            (pair(pk_g, key.h_cap), x["r_prime_prime"]),
            (htilde_h_cap, -x["m_prime"]),
            (pair(key.htilde, s), x["r"]),
        )
        t7 = gt_pow(expected7, c) * calc7

        expected8 = pair(g_cap, key.u) * gt_inv(pair(key.g, u_cap))
        calc8 = gt_prod(
            (pair(key.htilde, key.u), x["r"]), (neg_g_h_cap, x["r_prime_prime_prime"])
        )
        t8 = gt_pow(expected8, c) * calc8

        return [
            CommitmentValue.from_g1(t1),
            CommitmentValue.from_g1(t2),
            CommitmentValue.from_gt(t3),
            CommitmentValue.from_gt(t4),
            CommitmentValue.from_g1(t5),
            CommitmentValue.from_g1(t6),
            CommitmentValue.from_gt(t7),
            CommitmentValue.from_gt(t8),
        ]

    def non_revocation_c_list(
        self, non_revoc_proof: Union[NonRevocProof, ParsedNonRevocProof]
    ) -> List[CommitmentValue]:
        """Collect `E, D, A, G` (G1) and `W, S, U` (G2) as carried by the proof."""
        parsed = self._parsed_non_revocation(non_revoc_proof)
        return [
            CommitmentValue.from_g1(parsed.c_list[name]) for name in C_LIST_G1_KEYS
        ] + [CommitmentValue.from_g2(parsed.c_list[name]) for name in C_LIST_G2_KEYS]
