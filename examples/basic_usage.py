"""
Quorum — Basic Usage Example

Recovers a secret from five shares, one of which has been tampered with.
Majority vote outvotes the bad share; a direct solve on the first k
shares is shown for comparison.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum import Point, Strategy, parse_container, reconstruct, reconstruct_detailed


def main():
    print("=" * 50)
    print("  Quorum — Threshold Secret Reconstruction")
    print("=" * 50)

    # f(x) = 3x^2 + 7x + 987654321987654321, threshold 3.
    # Share 2 has been replaced with garbage.
    container = {
        "keys": {"n": 5, "k": 3},
        "1": {"base": "10", "value": "987654321987654331"},
        "2": {"base": "16", "value": "deadbeef"},
        "3": {"base": "10", "value": "987654321987654369"},
        "4": {"base": "10", "value": "987654321987654397"},
        "5": {"base": "10", "value": "987654321987654431"},
    }
    share_set = parse_container(container)
    print(f"\n  Threshold: {share_set.threshold}")
    print(f"  Shares:    {len(share_set.points)}")

    result = reconstruct_detailed(share_set.points, share_set.threshold)
    print("\n--- Majority vote ---")
    print(f"  Secret:       {result.secret}")
    print(f"  Votes:        {result.votes} of {result.combinations}")
    print(f"  Suspects:     {result.suspects}")
    print(f"  Fingerprint:  {result.fingerprint}")

    direct = reconstruct(share_set.points, share_set.threshold, Strategy.DIRECT)
    print("\n--- Direct (first k shares by x) ---")
    print(f"  Secret:       {direct}")
    print(f"  Matches:      {direct == result.secret}")

    print("\n--- Small example: x^2 + x + 1 ---")
    print(f"  Secret:       {reconstruct([Point(1, 3), Point(2, 6), Point(3, 11)], 3)}")
    print()


if __name__ == "__main__":
    main()
