"""Protocol constants for CL signature proofs, in bits unless noted."""

LARGE_NONCE = 80
LARGE_MASTER_SECRET = 256

LARGE_E_START = 596
LARGE_E_END_RANGE = 119
LARGE_ETILDE = 456
LARGE_VTILDE = 3060
LARGE_MVECT = 592
LARGE_UTILDE = 592
LARGE_RTILDE = 672
LARGE_VPRIME = 2128
LARGE_ALPHATILDE = 2787

# Width of the Fiat-Shamir challenge (SHA-256 digest)
CHALLENGE_BITS = 256

# Four-squares decomposition of a predicate delta
ITERATION = 4
DELTA = "DELTA"

MASTER_SECRET = "master_secret"

# Bounds on responses; anything wider cannot come from an honest prover
MAX_E_RESPONSE_BITS = LARGE_ETILDE + 1
MAX_M_RESPONSE_BITS = LARGE_MVECT + 1
MAX_U_RESPONSE_BITS = LARGE_UTILDE + 1

X_LIST_KEYS = (
    "rho",
    "r",
    "r_prime",
    "r_prime_prime",
    "r_prime_prime_prime",
    "o",
    "o_prime",
    "m",
    "m_prime",
    "t",
    "t_prime",
    "m2",
    "s",
    "c",
)
C_LIST_G1_KEYS = ("e", "d", "a", "g")
C_LIST_G2_KEYS = ("w", "s", "u")
C_LIST_KEYS = C_LIST_G1_KEYS + C_LIST_G2_KEYS
