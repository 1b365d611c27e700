import unittest

from units import Density, Unit, convert, dots_per_unit, to_dots, to_unit


class UnitConversionTests(unittest.TestCase):
    def test_factors(self) -> None:
        self.assertAlmostEqual(dots_per_unit(Unit.MILLIMETER, 203), 203 / 25.4)
        self.assertAlmostEqual(dots_per_unit(Unit.CENTIMETER, 203), 203 / 2.54)
        self.assertEqual(dots_per_unit(Unit.INCH, 300), 300)
        self.assertEqual(dots_per_unit(Unit.DOTS, 300), 1.0)

    def test_to_dots(self) -> None:
        self.assertAlmostEqual(to_dots(25.4, "mm", 203), 203)
        self.assertAlmostEqual(to_dots(2, "inches", 300), 600)
        self.assertEqual(to_dots(123.5, "dots", 203), 123.5)

    def test_no_rounding(self) -> None:
        self.assertAlmostEqual(to_dots(76, Unit.MILLIMETER, 203), 76 * 203 / 25.4)
        self.assertNotEqual(to_dots(76, Unit.MILLIMETER, 203), round(76 * 203 / 25.4))

    def test_round_trip(self) -> None:
        for unit in Unit:
            for dpi in Density:
                for value in (0.1, 1.0, 76.0, 130.5, 1234.567):
                    with self.subTest(unit=unit, dpi=dpi, value=value):
                        self.assertAlmostEqual(
                            to_unit(to_dots(value, unit, dpi), unit, dpi),
                            value,
                            places=9,
                        )

    def test_convert_keeps_physical_size(self) -> None:
        self.assertAlmostEqual(convert(76, Unit.MILLIMETER, Unit.CENTIMETER, 203), 7.6)
        self.assertAlmostEqual(convert(2, Unit.INCH, Unit.MILLIMETER, 300), 50.8)

    def test_invalid_inputs(self) -> None:
        with self.assertRaises(ValueError):
            to_dots(1, "furlong", 203)
        with self.assertRaises(ValueError):
            to_dots(1, "mm", 0)

    def test_unit_aliases(self) -> None:
        self.assertIs(Unit.parse("in"), Unit.INCH)
        self.assertIs(Unit.parse(" MM "), Unit.MILLIMETER)


class DensityTests(unittest.TestCase):
    def test_parse(self) -> None:
        self.assertIs(Density.parse("300"), Density.DPI_300)
        self.assertIs(Density.parse(203), Density.DPI_203)
        self.assertAlmostEqual(Density.DPI_203.dots_per_mm, 203 / 25.4)

    def test_parse_rejects_unknown(self) -> None:
        with self.assertRaises(ValueError):
            Density.parse("250")
        with self.assertRaises(ValueError):
            Density.parse("high")


if __name__ == "__main__":
    unittest.main()
