from newsintel.sources import DEFAULT_SOURCES, add_source, clean_domain, delete_source, display_name


def test_clean_domain_strips_scheme_www_path_and_case():
    assert clean_domain("https://www.Example.com/path") == "example.com"
    assert clean_domain("  http://News.Site.org/a/b?c=d ") == "news.site.org"
    assert clean_domain("wired.com") == "wired.com"


def test_display_name_strips_one_common_suffix():
    assert display_name("example.com") == "example"
    assert display_name("lawfare.io") == "lawfare"
    assert display_name("bbc.co.uk") == "bbc.co.uk"


def test_add_source_appends_cleaned_entry():
    out = add_source([], "https://www.Example.com/path")
    assert len(out) == 1
    assert out[0].domain == "example.com"
    assert out[0].name == "example"
    assert out[0].id.startswith("source-")


def test_add_source_is_idempotent_on_duplicates():
    first = add_source([], "https://www.Example.com/path")
    second = add_source(first, "https://www.Example.com/path")
    assert second is first
    assert add_source(first, "EXAMPLE.com") is first


def test_add_source_empty_input_is_noop():
    assert add_source(DEFAULT_SOURCES, "   ") is DEFAULT_SOURCES
    assert add_source(DEFAULT_SOURCES, "https://") is DEFAULT_SOURCES


def test_delete_source():
    out = delete_source(DEFAULT_SOURCES, "bbc")
    assert len(out) == len(DEFAULT_SOURCES) - 1
    assert all(s.id != "bbc" for s in out)
