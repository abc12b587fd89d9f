"""Property-based tests for offset to position conversion."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from stackref.position import resolve

line_text = st.text(alphabet=st.characters(blacklist_characters="\r\n"), max_size=20)


@pytest.mark.property
@pytest.mark.unit
class TestPositionProperties:
    @given(
        lines=st.lists(line_text, min_size=1, max_size=10),
        newline=st.sampled_from(["\n", "\r\n"]),
        data=st.data(),
    )
    @settings(max_examples=100)
    def test_round_trip(self, lines, newline, data):
        """The start of any (line, column) maps back to that position."""
        source = newline.join(lines)
        line = data.draw(st.integers(min_value=0, max_value=len(lines) - 1))
        column = data.draw(st.integers(min_value=0, max_value=len(lines[line])))
        offset = sum(len(text) + len(newline) for text in lines[:line]) + column
        assert resolve(source, offset) == (line, column)

    @given(
        prefix=st.text(alphabet="ab \n", max_size=40),
        inserted=st.text(alphabet="xy \n", max_size=20),
    )
    @settings(max_examples=100)
    def test_stable_under_earlier_edits(self, prefix, inserted):
        """Inserting text earlier shifts the token to its new true position."""
        token = "TOKEN"
        source = prefix + token
        edited = inserted + source
        offset = edited.index(token, len(inserted))
        expected_line = edited[:offset].count("\n")
        expected_column = offset - (edited.rfind("\n", 0, offset) + 1)
        assert resolve(edited, offset) == (expected_line, expected_column)

    @given(source=st.text(alphabet="ab\r\n", max_size=60), data=st.data())
    def test_line_matches_terminator_count(self, source, data):
        offset = data.draw(st.integers(min_value=0, max_value=len(source)))
        position = resolve(source, offset)
        assert position.column >= 0
        assert position.line <= source[:offset].count("\n")
