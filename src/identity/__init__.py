"""Record identity: unique key generation and UUID minting."""
