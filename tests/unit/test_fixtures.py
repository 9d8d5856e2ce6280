"""Unit tests for fixture flattening."""

from e2e_sandbox.models.fixture import flatten_fixtures


class TestFlattenFixtures:
    """Test fixture ordering."""

    def test_single_fixture(self):
        fixture = {"package.json": "{}", "src/index.ts": "export {};"}
        assert flatten_fixtures(fixture) == [
            ("package.json", "{}"),
            ("src/index.ts", "export {};"),
        ]

    def test_sequence_preserves_fixture_then_key_order(self):
        base = {"a.txt": "1", "b.txt": "2"}
        extra = {"c.txt": "3"}
        assert flatten_fixtures([base, extra]) == [
            ("a.txt", "1"),
            ("b.txt", "2"),
            ("c.txt", "3"),
        ]

    def test_colliding_paths_are_kept_in_sequence(self):
        """Test later fixtures come after earlier ones for the same path."""
        writes = flatten_fixtures([{"tsconfig.json": "old"}, {"tsconfig.json": "new"}])
        assert writes == [("tsconfig.json", "old"), ("tsconfig.json", "new")]

    def test_empty(self):
        assert flatten_fixtures([]) == []
        assert flatten_fixtures({}) == []
