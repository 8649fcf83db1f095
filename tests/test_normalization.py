import unittest

from arrowword.data.normalization import (
    ANONYMOUS_NICKNAME_KEY,
    nickname_key,
    normalize_answer,
    normalize_letter,
)


class NormalizationTests(unittest.TestCase):
    def test_answer_is_uppercased_and_filtered(self) -> None:
        self.assertEqual(normalize_answer("  Grüße, Welt! "), "GRÜßEWELT")
        self.assertEqual(normalize_answer(None), "")
        self.assertEqual(normalize_answer("123"), "")

    def test_capital_sharp_s_folds_to_single_cell_letter(self) -> None:
        self.assertEqual(normalize_answer("STRAẞE"), "STRAßE")

    def test_letter(self) -> None:
        self.assertEqual(normalize_letter("ä"), "Ä")
        self.assertIsNone(normalize_letter("é"))
        self.assertIsNone(normalize_letter("ab"))
        self.assertIsNone(normalize_letter(None))

    def test_nickname_key(self) -> None:
        self.assertEqual(nickname_key("  Ann "), "ann")
        self.assertEqual(nickname_key("ANN"), nickname_key("ann"))
        self.assertEqual(nickname_key("   "), ANONYMOUS_NICKNAME_KEY)
        self.assertEqual(nickname_key(None, "?"), "?")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
