import argparse
import sys

from .config import AttackConfig
from .core.connection import Connection
from .core.errors import OracleSolverError
from .core.remote import RemoteOracle
from .exercises import EXERCISES, run
from .modules import ByteAtATimeSolver


def attack_remote(host, port, config):
    """
    Recovers the suffix appended by a remote ECB oracle.
    """
    print(f"[*] Connecting to {host}:{port}...")
    with Connection(host, port) as conn:
        oracle = RemoteOracle(conn, config.block_size)
        solver = ByteAtATimeSolver(config)
        if not solver.uses_ecb(oracle):
            print("[-] Oracle does not look like ECB, trying anyway")
        suffix = solver.decrypt_suffix(oracle)
    print(f"\n[SUCCESS] Suffix: {suffix!r}")
    return suffix


def build_config(args):
    return AttackConfig(
        workers=args.workers,
        verbose=args.verbose,
        max_queries=args.max_queries or None,
        rsa_bits=args.rsa_bits,
        data_dir=args.data_dir,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Adaptive oracle attacks")
    parser.add_argument("challenges", nargs="*", type=int,
                        help=f"Challenges to run, among {sorted(EXERCISES)} (default: all)")
    parser.add_argument("--host", help="Target host of a remote suffix oracle")
    parser.add_argument("--port", help="Target port")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads for independent oracle queries")
    parser.add_argument("--rsa-bits", type=int, default=256,
                        help="Modulus size for challenge 47")
    parser.add_argument("--max-queries", type=int, default=10_000_000,
                        help="Oracle query cap for the RSA attack (0 disables)")
    parser.add_argument("--data-dir",
                        help="Directory with the challenge data files (10.txt, 10.ref.txt)")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)
    unknown = [c for c in args.challenges if c not in EXERCISES]
    if unknown:
        parser.error(f"unknown challenge(s): {unknown}")
    config = build_config(args)
    config.log(f"[*] Config: {config.to_dict()}")

    # 1. Handle Connection
    if args.host or args.port:
        if not (args.host and args.port):
            parser.error("--host and --port go together")
        try:
            attack_remote(args.host, args.port, config)
        except OracleSolverError as e:
            print(f"[-] Attack failed: {e}")
            return 1
        return 0

    # 2. Run exercises
    failed = run(args.challenges, config)
    if failed:
        print(f"[-] Failed: {', '.join(map(str, failed))}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
