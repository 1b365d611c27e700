import unittest

from zpl_tokenizer import label_body, tokenize
from zpl_types import Token


class TokenizerTests(unittest.TestCase):
    def test_empty_input(self) -> None:
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])

    def test_splits_on_prefix(self) -> None:
        tokens = tokenize("^XA^FO15,296^GB553,0,1^FS^XZ")
        self.assertEqual(
            tokens,
            [
                Token("FO", "15,296"),
                Token("GB", "553,0,1"),
                Token("FS", ""),
            ],
        )

    def test_body_between_markers(self) -> None:
        text = "junk^FOignored\n^XA^FO1,2^FS^XZ^FDafter"
        self.assertEqual(label_body(text), "^FO1,2^FS")

    def test_markers_in_wrong_order_use_whole_text(self) -> None:
        text = "^XZ^FO1,2^XA"
        self.assertEqual(label_body(text), text)

    def test_whitespace_and_short_fragments_dropped(self) -> None:
        tokens = tokenize("^XA\n  ^F\n^   \n^FDHello world\n^FS\n^XZ")
        self.assertEqual([t.code for t in tokens], ["FD", "FS"])
        self.assertEqual(tokens[0].arguments, "Hello world")

    def test_field_data_keeps_inner_commas(self) -> None:
        tokens = tokenize("^FDD03040C,LA,HELLO^FS")
        self.assertEqual(tokens[0], Token("FD", "D03040C,LA,HELLO"))


if __name__ == "__main__":
    unittest.main()
