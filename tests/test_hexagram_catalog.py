"""Tests for the 64-hexagram catalog, its CSV loader and translation URLs."""
import itertools

import pytest

from config import DEFAULT_DATA_PATH
from hexagram_catalog import (
    CatalogLoadError,
    Hexagram,
    HexagramCatalog,
    HexagramNotFoundError,
    legge_url,
    translation_urls,
    wilhelm_url,
)

HEADER = "lines,name,character,description,chinese_name"


def read_rows():
    return DEFAULT_DATA_PATH.read_text(encoding="utf-8").splitlines()[1:]


def write_csv(tmp_path, rows, header=HEADER):
    path = tmp_path / "hexagrams.csv"
    path.write_text("\n".join([header] + list(rows)) + "\n", encoding="utf-8")
    return path


class TestDefaultCatalog:
    def test_size(self, catalog):
        assert len(catalog) == 64
        assert len(catalog.all()) == 64

    def test_ordered_by_number(self, catalog):
        assert [h.number for h in catalog.all()] == list(range(1, 65))
        assert [h.number for h in catalog] == list(range(1, 65))

    def test_signature_bijection(self, catalog):
        numbers = set()
        for signature in itertools.product([False, True], repeat=6):
            hexagram = catalog.lookup_by_signature(signature)
            assert hexagram.lines == signature
            numbers.add(hexagram.number)
        assert numbers == set(range(1, 65))

    def test_lookup_by_number(self, catalog):
        creative = catalog.lookup_by_number(1)
        assert creative.name == "The Creative"
        assert creative.lines == (True,) * 6
        assert catalog.lookup_by_number(2).lines == (False,) * 6

    @pytest.mark.parametrize("number", [0, 65, -1])
    def test_lookup_by_number_out_of_range(self, catalog, number):
        with pytest.raises(HexagramNotFoundError):
            catalog.lookup_by_number(number)

    def test_known_signatures(self, catalog):
        assert catalog.lookup_by_signature([True, False, False, False, True, False]).number == 3
        assert catalog.lookup_by_signature([False, False, False, True, True, False]).number == 45
        assert catalog.lookup_by_signature([True, True, True, False, False, False]).name == "Peace"

    def test_glyphs(self, catalog):
        for hexagram in catalog:
            assert hexagram.character == chr(0x4DC0 + hexagram.number - 1)

    def test_metadata(self, catalog):
        well = catalog.lookup_by_number(48)
        assert well.name == "The Well"
        assert well.chinese_name == "井"
        assert well.binary == "011010"
        assert well.description
        assert well.translation_urls == translation_urls(48)

    def test_find_by_signature_wrong_length(self, catalog):
        assert catalog.find_by_signature([True, False]) is None
        with pytest.raises(HexagramNotFoundError):
            catalog.lookup_by_signature([True, False])

    def test_immutable_records(self, catalog):
        with pytest.raises(AttributeError):
            catalog.lookup_by_number(1).name = "Changed"


class TestCatalogLoader:
    def test_round_trip_copy(self, tmp_path):
        catalog = HexagramCatalog.from_csv(write_csv(tmp_path, read_rows()))
        assert len(catalog) == 64

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(tmp_path / "missing.csv")

    def test_missing_column(self, tmp_path):
        rows = [row.rsplit(",", 1)[0] for row in read_rows()]
        path = write_csv(tmp_path, rows, header="lines,name,character,chinese_name")
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(path)

    def test_optional_chinese_name(self, tmp_path):
        rows = [row.rsplit(",", 1)[0] for row in read_rows()]
        path = write_csv(tmp_path, rows, header="lines,name,character,description")
        catalog = HexagramCatalog.from_csv(path)
        assert catalog.lookup_by_number(1).chinese_name == ""

    def test_too_few_rows(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(write_csv(tmp_path, read_rows()[:63]))

    def test_duplicate_signature(self, tmp_path):
        rows = read_rows()
        first_sig = rows[0].split(",", 1)[0]
        rows[1] = first_sig + "," + rows[1].split(",", 1)[1]
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(write_csv(tmp_path, rows))

    def test_bad_token(self, tmp_path):
        rows = read_rows()
        rows[0] = "true|true|yes|true|true|true," + rows[0].split(",", 1)[1]
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(write_csv(tmp_path, rows))

    def test_short_signature(self, tmp_path):
        rows = read_rows()
        rows[0] = "true|true|true," + rows[0].split(",", 1)[1]
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(write_csv(tmp_path, rows))

    def test_alternate_bool_tokens(self, tmp_path):
        rows = read_rows()
        rows[0] = "1|T|TRUE|True|t|true," + rows[0].split(",", 1)[1]
        catalog = HexagramCatalog.from_csv(write_csv(tmp_path, rows))
        assert catalog.lookup_by_number(1).lines == (True,) * 6

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(tmp_path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(CatalogLoadError):
            HexagramCatalog.from_csv(path)


class TestCatalogConstruction:
    def test_rejects_incomplete_catalog(self):
        hexagrams = [
            Hexagram(number=1, lines=(True,) * 6, name="The Creative", character="䷀", description="")
        ]
        with pytest.raises(CatalogLoadError):
            HexagramCatalog(hexagrams)


class TestTranslationUrls:
    def test_wilhelm(self):
        assert wilhelm_url(1) == "http://www.akirarabelais.com/i/i.html#1"
        assert wilhelm_url(64) == "http://www.akirarabelais.com/i/i.html#64"

    def test_legge_padding(self):
        assert legge_url(3) == "http://www.sacred-texts.com/ich/ic03.htm"
        assert legge_url(9) == "http://www.sacred-texts.com/ich/ic09.htm"
        assert legge_url(10) == "http://www.sacred-texts.com/ich/ic10.htm"
        assert legge_url(42) == "http://www.sacred-texts.com/ich/ic42.htm"

    def test_custom_base(self):
        assert legge_url(5, base_url="https://example.org/") == "https://example.org/ic05.htm"

    def test_uses_hexagram_number(self):
        assert translation_urls(1) == (wilhelm_url(1), legge_url(1))

    @pytest.mark.parametrize("number", [0, 65])
    def test_out_of_range(self, number):
        with pytest.raises(ValueError):
            legge_url(number)
