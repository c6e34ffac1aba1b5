"""
Tests for reconstruction configuration.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum.config import ReconstructionConfig
from quorum.errors import MalformedInputError
from quorum.selector import DEFAULT_CHUNK_SIZE, Strategy


def test_defaults():
    print("Testing defaults...", end=" ")
    config = ReconstructionConfig.from_env({})
    assert config.strategy is Strategy.MAJORITY_VOTE
    assert config.workers == 1
    assert config.max_combinations is None
    assert config.chunk_size == DEFAULT_CHUNK_SIZE
    print("PASS")


def test_from_env():
    print("Testing environment overrides...", end=" ")
    config = ReconstructionConfig.from_env({
        "QUORUM_STRATEGY": " Direct ",
        "QUORUM_WORKERS": "4",
        "QUORUM_MAX_COMBINATIONS": "1000",
        "QUORUM_CHUNK_SIZE": "32",
        "UNRELATED": "x",
    })
    assert config.strategy is Strategy.DIRECT
    assert config.workers == 4
    assert config.max_combinations == 1000
    assert config.chunk_size == 32
    assert config.options() == {
        "workers": 4,
        "max_combinations": 1000,
        "chunk_size": 32,
    }
    print("PASS")


def test_rejects_bad_values():
    print("Testing rejected values...", end=" ")
    bad_envs = [
        {"QUORUM_STRATEGY": "plurality"},
        {"QUORUM_WORKERS": "many"},
        {"QUORUM_WORKERS": "0"},
        {"QUORUM_MAX_COMBINATIONS": "-5"},
        {"QUORUM_CHUNK_SIZE": "0"},
    ]
    for environ in bad_envs:
        try:
            ReconstructionConfig.from_env(environ)
        except MalformedInputError:
            pass
        else:
            raise AssertionError(f"{environ} should have raised")
    print("PASS")


def test_strategy_by_name():
    print("Testing strategy by name...", end=" ")
    assert ReconstructionConfig(strategy="majority").strategy is Strategy.MAJORITY_VOTE
    assert ReconstructionConfig(strategy=Strategy.DIRECT).strategy is Strategy.DIRECT
    print("PASS")


def main():
    print("=" * 50)
    print("  Configuration Tests")
    print("=" * 50)
    print()

    tests = [
        test_defaults,
        test_from_env,
        test_rejects_bad_values,
        test_strategy_by_name,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
