"""Project fixtures: relative path to file content."""

from typing import List, Mapping, Sequence, Tuple, Union

Fixture = Mapping[str, str]


def flatten_fixtures(
    fixtures: Union[Fixture, Sequence[Fixture]],
) -> List[Tuple[str, str]]:
    """Flatten one or more fixtures into an ordered list of writes.

    Order follows the fixture sequence, then each fixture's key order. Paths
    that appear in several fixtures are kept; applying the writes in order
    makes the last one win.
    """
    if isinstance(fixtures, Mapping):
        fixtures = [fixtures]

    return [(path, content) for fixture in fixtures for path, content in fixture.items()]
