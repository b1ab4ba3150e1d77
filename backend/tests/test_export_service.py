from review_assistant.models import SearchedLiterature
from review_assistant.services.export_service import (
    build_markdown_export,
    build_renumber_map,
    collect_cited_numbers,
    render_references_section,
    renumber_citations,
    to_bibtex,
    to_csv,
    to_ris,
)
from review_assistant.services.import_service import detect_columns, parse_csv


def _lit(title, **kwargs):
    return SearchedLiterature(title=title, **kwargs)


def test_collect_cited_numbers_handles_groups_and_bounds():
    content = "见 [2]，另见 [1, 3]、[3] 以及 [0] [4] [12]"
    assert collect_cited_numbers(content, 3) == [1, 2, 3]


def test_collect_cited_numbers_ignores_non_numeric_brackets():
    assert collect_cited_numbers("[a] [1a] [ 1 ] [1,]", 5) == []


def test_collect_cited_numbers_skips_oversized_numbers():
    huge = "9" * 5000
    assert collect_cited_numbers(f"See [1] and [{huge}] and [2, {huge}].", 3) == [1, 2]
    assert collect_cited_numbers("[002] [0003]", 3) == [2, 3]


def test_export_with_oversized_citation_keeps_marker():
    huge = "1" + "0" * 5000
    content = f"A [2] B [{huge}]"
    literature = [_lit("A"), _lit("B")]

    assert build_markdown_export(content, literature).startswith(content + "\n\n## References\n\n1. **B**")
    assert build_markdown_export(content, literature, renumber=True).startswith(f"A [1] B [{huge}]\n")


def test_references_follow_ascending_cited_order():
    literature = [_lit("A"), _lit("B"), _lit("C")]
    exported = build_markdown_export("X [3] Y [1]", literature)

    assert exported.startswith("X [3] Y [1]\n\n## References\n\n")
    assert exported.index("1. **A**") < exported.index("2. **C**")
    assert "**B**" not in exported


def test_no_citations_renders_placeholder():
    exported = build_markdown_export("no citations here", [_lit("A")])
    assert exported == "no citations here\n\n## References\n\nNo references cited in the text.\n"


def test_out_of_range_citations_are_dropped_silently():
    exported = build_markdown_export("[0] [5]", [_lit("A")])
    assert exported.endswith("No references cited in the text.\n")


def test_reference_entry_format():
    section = render_references_section([
        _lit("Title", authors="Ann, Bo", doi="10.1/x", url="http://x", source="pubmed"),
    ])
    assert section == (
        "\n\n## References\n\n"
        "1. **Title**\n"
        "   Authors: Ann, Bo\n"
        "   DOI: 10.1/x\n"
        "   URL: http://x\n"
        "   Source: pubmed\n"
        "\n"
    )


def test_export_is_idempotent_for_same_input():
    literature = [_lit("A"), _lit("B")]
    assert build_markdown_export("[2] [1]", literature) == build_markdown_export("[2] [1]", literature)


def test_renumber_rewrites_only_in_range_numbers():
    mapping = build_renumber_map([2, 5])
    assert mapping == {2: 1, 5: 2}
    assert renumber_citations("a [5] b [2, 5] c [9]", mapping) == "a [2] b [1, 2] c [9]"


def test_renumbered_export_matches_reference_list():
    literature = [_lit("A"), _lit("B"), _lit("C")]
    exported = build_markdown_export("X [3]", literature, renumber=True)
    assert exported.startswith("X [1]\n")
    assert "1. **C**" in exported


def test_ris_splits_authors_and_reads_metadata():
    ris = to_ris([_lit(
        "Title",
        authors="Ann Lee; Bo Chen",
        metadata_json='{"published": "2021-Mar", "journal": "Nature"}',
    )])
    assert "TY  - JOUR\n" in ris
    assert "AU  - Ann Lee\nAU  - Bo Chen\n" in ris
    assert "PY  - 2021-Mar\n" in ris
    assert "JO  - Nature\n" in ris
    assert ris.endswith("ER  - \n\n")


def test_bibtex_keys_are_sequential_and_bad_metadata_ignored():
    bibtex = to_bibtex([_lit("One", metadata_json="not json"), _lit("Two")])
    assert "@article{ref1,\n  title = {One},\n}" in bibtex
    assert "@article{ref2," in bibtex
    assert "year" not in bibtex


def test_csv_quotes_everything_with_bom():
    text = to_csv([_lit('Say "hi"', authors="Ann", metadata_json='{"published": "2020"}')])
    lines = text.lstrip("\ufeff").splitlines()
    assert text.startswith("\ufeff")
    assert lines[0] == '"title","authors","abstract","doi","url","source","published"'
    assert lines[1] == '"Say ""hi""","Ann","","","","","2020"'


# ========== CSV 导入 ==========

def test_detect_columns_by_alias():
    columns = detect_columns(["Paper Title", "Author(s)", "Abstract", "URL", "Published Date"])
    assert columns == {"title": 0, "authors": 1, "abstract": 2, "url": 3, "published": 4}


def test_parse_csv_without_title_column_skips_all_rows():
    result = parse_csv("作者,摘要\nAnn,x\nBo,y\n")
    assert result.papers == []
    assert result.skipped == 2


def test_parse_csv_short_rows_fill_empty_strings():
    result = parse_csv("标题,作者,摘要\nOnly title\n")
    assert result.papers == [{"title": "Only title", "authors": "", "abstract": "", "url": "", "published": ""}]


def test_parse_csv_handles_quoted_commas():
    result = parse_csv('title,author\n"A, B and C","Ann, Bo"\n')
    assert result.papers[0]["title"] == "A, B and C"
    assert result.papers[0]["authors"] == "Ann, Bo"
