import json
import tempfile
import unittest
from pathlib import Path

from numberlink.core.exceptions import PuzzleDefinitionError, PuzzleParseError
from numberlink.io.loader import load_puzzle, parse_puzzle, puzzle_from_jsonable

SAMPLE = """\
# sample puzzle
size 7
link '1', [4,0], [4,4]
link 'A', [0,6], [3,2], [2,2]
"""


class ParsePuzzleTests(unittest.TestCase):
    def test_parses_size_and_links(self) -> None:
        definition = parse_puzzle(SAMPLE)
        self.assertEqual((definition.rows, definition.cols), (7, 7))
        self.assertEqual(definition.names, ("1", "A"))
        self.assertEqual(definition.anchors("A"), ((0, 6), (3, 2), (2, 2)))
        self.assertEqual(definition.section_count(), 3)

    def test_rectangular_size(self) -> None:
        definition = parse_puzzle("size 1 2\nlink 'A', [0,0], [0,1]\n")
        self.assertEqual((definition.rows, definition.cols), (1, 2))

    def test_whitespace_inside_points(self) -> None:
        definition = parse_puzzle("size 3\nlink 'AB' , [ 0 , 0 ] ,[2,2]\n")
        self.assertEqual(definition.anchors("AB"), ((0, 0), (2, 2)))

    def test_errors_carry_source_and_line(self) -> None:
        with self.assertRaises(PuzzleParseError) as ctx:
            parse_puzzle("size 3\n\nlink 'A', [0,0], [3,0]\n", source="demo.txt")
        self.assertEqual(ctx.exception.line, 3)
        self.assertEqual(ctx.exception.source, "demo.txt")
        self.assertEqual(
            str(ctx.exception), "demo.txt(3) : 3 : row number must be between 0 and 2."
        )

    def test_rejected_inputs(self) -> None:
        cases = {
            "link before size": "link 'A', [0,0], [0,2]\nsize 3\n",
            "size out of range": "size 100\n",
            "size not a number": "size seven\n",
            "unknown method": "size 3\nwall 'A', [0,0]\n",
            "unquoted name": "size 3\nlink A, [0,0], [0,2]\n",
            "long name": "size 3\nlink 'ABC', [0,0], [0,2]\n",
            "column out of range": "size 3\nlink 'A', [0,0], [0,3]\n",
            "malformed point": "size 3\nlink 'A', [0,0], [0;2]\n",
            "single point": "size 3\nlink 'A', [0,0]\n",
            "duplicate name": "size 3\nlink 'A', [0,0], [0,2]\nlink 'A', [1,0], [1,2]\n",
            "duplicate point": "size 3\nlink 'A', [0,0], [0,2]\nlink 'B', [0,2], [1,2]\n",
            "missing size": "# nothing here\n",
            "no links": "size 3\n",
        }
        for label, text in cases.items():
            with self.subTest(label):
                with self.assertRaises(PuzzleParseError):
                    parse_puzzle(text)

    def test_parse_error_is_a_definition_error(self) -> None:
        with self.assertRaises(PuzzleDefinitionError):
            parse_puzzle("size 0\n")


class LoadPuzzleTests(unittest.TestCase):
    def test_load_text_and_json_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            text_path = Path(tmp) / "rows.txt"
            text_path.write_text(SAMPLE, encoding="utf-8")
            from_text = load_puzzle(text_path)

            json_path = Path(tmp) / "rows.json"
            json_path.write_text(
                json.dumps({"size": 7, "links": {"1": [[4, 0], [4, 4]], "A": [[0, 6], [3, 2], [2, 2]]}}),
                encoding="utf-8",
            )
            from_json = load_puzzle(str(json_path))

        self.assertEqual(from_text.names, from_json.names)
        for name in from_text.names:
            self.assertEqual(from_text.anchors(name), from_json.anchors(name))

    def test_invalid_json_reports_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(PuzzleParseError) as ctx:
                load_puzzle(path)
        self.assertIn("broken.json", str(ctx.exception))

    def test_json_document_shape_is_checked(self) -> None:
        with self.assertRaises(PuzzleParseError):
            puzzle_from_jsonable({"links": {}})
        with self.assertRaises(PuzzleParseError):
            puzzle_from_jsonable({"size": 3, "links": {"A": [[0, 0]]}})
        definition = puzzle_from_jsonable({"size": 1, "columns": 2, "links": {"A": [[0, 0], [0, 1]]}})
        self.assertEqual(definition.cols, 2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
