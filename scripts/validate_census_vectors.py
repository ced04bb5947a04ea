from __future__ import annotations

from zk_census.census_protocol.test_vectors import census_vectors


def main() -> int:
    data = census_vectors.load_vectors()
    errors = census_vectors.validate_vectors(data)
    if errors:
        for error in errors:
            print(f"census_vectors.json: {error}")
        return 1
    print("census_vectors.json: OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
