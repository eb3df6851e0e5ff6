"""Verifier for CL anonymous credential proofs."""
