from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

BLOCK_SIZE = 16


@dataclass
class AttackConfig:
    """
    Tunables shared by the attack engines.

    workers > 1 lets independent oracle queries (candidate bytes, reference
    ciphertexts, speculative multipliers) run on a thread pool.
    max_iterations and max_queries bound the interval-narrowing engine;
    max_queries=None disables the query cap.
    data_dir holds the challenge data files (10.txt, 10.ref.txt).
    """
    block_size: int = BLOCK_SIZE
    workers: int = 1
    verbose: bool = False
    max_iterations: int = 10_000
    max_queries: Optional[int] = 10_000_000
    rsa_bits: int = 256
    data_dir: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        return asdict(self)

    def log(self, message: str):
        if self.verbose:
            print(message)
