import unittest

from zpl_interpreter import (
    DEFAULT_FONT,
    InterpreterState,
    apply_token,
    clean_qr_payload,
    interpret,
    parse_int,
    parse_zpl,
)
from zpl_types import (
    BarcodeElement,
    BoxElement,
    ImageElement,
    PendingBarcode,
    PendingQrcode,
    QrcodeElement,
    Rotation,
    TextElement,
    Token,
)


class ParseIntTests(unittest.TestCase):
    def test_leading_integer(self) -> None:
        self.assertEqual(parse_int("15"), 15)
        self.assertEqual(parse_int(" -3"), -3)
        self.assertEqual(parse_int("3.0"), 3)
        self.assertEqual(parse_int("12abc"), 12)

    def test_defaults(self) -> None:
        self.assertIsNone(parse_int("abc"))
        self.assertEqual(parse_int("", 7), 7)
        self.assertEqual(parse_int(None, 0), 0)


class QrPayloadTests(unittest.TestCase):
    def test_structured_prefix(self) -> None:
        self.assertEqual(clean_qr_payload("D03040C,LA,HELLO"), "HELLO")

    def test_structured_prefix_without_mode(self) -> None:
        self.assertEqual(clean_qr_payload("D03040C,HELLO"), "HELLO")

    def test_mode_letters(self) -> None:
        self.assertEqual(clean_qr_payload("QA,https://example.com"), "https://example.com")
        self.assertEqual(clean_qr_payload("A,1234"), "1234")

    def test_plain_payload_untouched(self) -> None:
        self.assertEqual(clean_qr_payload("HELLO,WORLD"), "HELLO,WORLD")


class InterpreterScenarioTests(unittest.TestCase):
    def test_rule(self) -> None:
        elements = parse_zpl("^XA^FO15,296^GB553,0,1,B^FS^XZ")
        self.assertEqual(len(elements), 1)
        box = elements[0]
        self.assertIsInstance(box, BoxElement)
        assert isinstance(box, BoxElement)
        self.assertEqual((box.x, box.y, box.width, box.height), (15, 296, 553, 0))
        self.assertEqual(box.border_thickness, 1)
        self.assertTrue(box.is_rule)

    def test_rotated_text(self) -> None:
        elements = parse_zpl("^XA^FO0,112^A@R,18,18^FDABC^FS^XZ")
        self.assertEqual(
            elements,
            [
                TextElement(
                    x=0,
                    y=112,
                    font_name=DEFAULT_FONT,
                    font_size=18,
                    rotation=Rotation.ROTATED,
                    content="ABC",
                )
            ],
        )
        self.assertEqual(elements[0].rotation.degrees, -90)

    def test_qr_payload_cleaned(self) -> None:
        elements = parse_zpl("^XA^FO354,456^BQ,2,5^FDD03040C,LA,HELLO^FS^XZ")
        self.assertEqual(
            elements,
            [QrcodeElement(x=354, y=456, dot_size=5, content="HELLO")],
        )

    def test_barcode_uses_defaults_and_override(self) -> None:
        elements = parse_zpl("^XA^FO20,120^BY5^BCN,101,N,N,N,A^FDSF123^FS^XZ")
        self.assertEqual(
            elements,
            [BarcodeElement(x=20, y=120, height=101, module_width=5, content="SF123")],
        )

    def test_barcode_height_from_defaults(self) -> None:
        elements = parse_zpl("^BY3,2.0,60^FO1,1^BC^FD12^FS^FO2,2^BC^FD34^FS")
        self.assertEqual([e.height for e in elements], [60, 60])
        self.assertEqual([e.module_width for e in elements], [3, 3])

    def test_label_home_offsets_field_origin(self) -> None:
        elements = parse_zpl("^LH10,20^FO5,5^FDx^FS")
        self.assertEqual((elements[0].x, elements[0].y), (15, 25))

    def test_label_home_invalid_parses_to_zero(self) -> None:
        elements = parse_zpl("^LH10,20^LHabc^FO5,5^FDx^FS")
        self.assertEqual((elements[0].x, elements[0].y), (5, 5))

    def test_default_font_size(self) -> None:
        elements = parse_zpl("^CF0,40^FO0,0^FDa^FS^CF0^FO0,0^FDb^FS")
        self.assertEqual([e.font_size for e in elements], [40, 40])

    def test_font_select_keeps_size_when_invalid(self) -> None:
        elements = parse_zpl("^A@I,30^FDa^FS^A@N,x^FDb^FS")
        self.assertEqual([e.font_size for e in elements], [30, 30])
        self.assertEqual([e.rotation for e in elements], [Rotation.INVERTED, Rotation.NORMAL])

    def test_graphic_field_placeholder(self) -> None:
        elements = parse_zpl("^FO452,728^GFA,1352,1352,13,FFFF^FS")
        self.assertEqual(
            elements,
            [ImageElement(x=452, y=728, width=104, height=104)],
        )
        self.assertEqual(elements[0].pixel_data, b"")

    def test_graphic_field_defaults(self) -> None:
        elements = parse_zpl("^FO1,2^GFA^FS")
        self.assertEqual((elements[0].width, elements[0].height), (80, 80))

    def test_graphic_field_rounds_height_up(self) -> None:
        elements = parse_zpl("^GFA,10,10,3,00^FS")
        self.assertEqual((elements[0].width, elements[0].height), (24, 4))

    def test_field_separator_without_data(self) -> None:
        self.assertEqual(parse_zpl("^XA^FO1,1^FS^FS^XZ"), [])

    def test_unknown_directives_skipped(self) -> None:
        elements = parse_zpl("^XA^MMT^CI28^CW0,E:X.TTF^ZZ1^FO1,1^FDok^FS^XZ")
        self.assertEqual([e.content for e in elements], ["ok"])

    def test_unterminated_construct_discarded(self) -> None:
        self.assertEqual(parse_zpl("^XA^FO1,1^BQ,2,5^FDQA,HELLO^XZ"), [])

    def test_separator_clears_pending_construct(self) -> None:
        elements = parse_zpl("^BQ,2,5^FDQA,one^FS^FDtwo^FS")
        self.assertIsInstance(elements[0], QrcodeElement)
        self.assertIsInstance(elements[1], TextElement)

    def test_declared_width(self) -> None:
        self.assertEqual(interpret("^XA^PW596^XZ").declared_width, 596)
        self.assertIsNone(interpret("^XA^PW0^XZ").declared_width)
        self.assertEqual(len(interpret("^XA^PW596^XZ")), 0)

    def test_idempotent(self) -> None:
        text = "^XA^FO1,2^A@N,20,20^FDa^FS^FO3,4^BQ,2,3^FDQA,x^FS^FO5,6^GB10,10,2^FS^XZ"
        self.assertEqual(interpret(text), interpret(text))


class PendingConstructTests(unittest.TestCase):
    def test_most_recent_construct_wins(self) -> None:
        state = InterpreterState()
        state, _ = apply_token(state, Token("BQ", ",2,5"))
        self.assertEqual(state.pending, PendingQrcode())
        state, _ = apply_token(state, Token("BC", "N"))
        self.assertEqual(state.pending, PendingBarcode(height=None))

        elements = parse_zpl("^BQ,2,5^BCN^FD123^FS")
        self.assertEqual(len(elements), 1)
        self.assertIsInstance(elements[0], BarcodeElement)

    def test_box_ignores_pending_construct(self) -> None:
        state, _ = apply_token(InterpreterState(), Token("BC", "N"))
        state, box = apply_token(state, Token("GB", "10,0,1"))
        self.assertIsInstance(box, BoxElement)
        self.assertIsInstance(state.pending, PendingBarcode)

    def test_state_is_not_mutated(self) -> None:
        state = InterpreterState()
        new_state, _ = apply_token(state, Token("FO", "5,6"))
        self.assertEqual((state.cursor_x, state.cursor_y), (0, 0))
        self.assertEqual((new_state.cursor_x, new_state.cursor_y), (5, 6))

    def test_qr_magnification_reset_when_invalid(self) -> None:
        state, _ = apply_token(InterpreterState(), Token("BQ", ",2,9"))
        self.assertEqual(state.qr_magnification, 9)
        state, _ = apply_token(state, Token("BQ", ",2,0"))
        self.assertEqual(state.qr_magnification, 4)


if __name__ == "__main__":
    unittest.main()
