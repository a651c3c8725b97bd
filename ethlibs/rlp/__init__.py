"""Recursive Length Prefix values: encoding, decoding and Keccak-256 hashing."""