"""
Tests for line normalization and the token scanner.
"""
from exp_auditor.utils.parsers.tokens import (
    ConfigLine,
    find_state,
    match_anchor,
    normalize_lines,
    parse_port,
    scan_fields,
    tokenize,
)


def _line(text: str) -> ConfigLine:
    return normalize_lines(text)[0]


def test_drops_blank_and_comment_lines():
    text = "\n   \n# comment\n   // another comment\nips enable\n\t\n"
    lines = normalize_lines(text)
    assert [line.text for line in lines] == ["ips enable"]


def test_keeps_source_line_numbers():
    lines = normalize_lines("# header\n\nips enable\ngateway-av enable")
    assert [line.number for line in lines] == [3, 4]


def test_trims_whitespace():
    lines = normalize_lines("   hostname fw01   \r\n")
    assert lines[0].text == "hostname fw01"


def test_accepts_bytes_with_invalid_utf8():
    lines = normalize_lines(b"\xff\xfe\x00garbage\nips enable\n")
    assert len(lines) == 2
    assert lines[1].words == ("ips", "enable")


def test_none_and_empty_input():
    assert normalize_lines(None) == []
    assert normalize_lines("") == []
    assert normalize_lines("   \n\t\n") == []


def test_very_long_line_is_not_truncated():
    text = "hostname " + "a" * 200_000
    lines = normalize_lines(text)
    assert len(lines) == 1
    assert len(lines[0].tokens[1]) == 200_000


def test_tokenize_quoted_and_bare():
    tokens, words = tokenize('access-rule name "Allow Web" action ALLOW')
    assert tokens == ("access-rule", "name", "Allow Web", "action", "ALLOW")
    assert words == ("access-rule", "name", None, "action", "allow")


def test_tokenize_unclosed_quote_runs_to_end_of_line():
    tokens, _ = tokenize('vpn policy "Broken name here')
    assert tokens == ("vpn", "policy", "Broken name here")


def test_quoted_token_never_matches_keyword():
    line = _line('"ips" enable')
    assert match_anchor(line.words, (("ips",),)) is None


def test_match_anchor_with_command_prefix():
    line = _line("set gateway anti-virus enable")
    assert match_anchor(line.words, (("gateway", "anti-virus"),)) == 3
    assert match_anchor(_line("add ntp server 10.0.0.1").words, (("ntp", "server"),)) == 3


def test_match_anchor_after_section_prefix():
    assert match_anchor(_line("config access-rule from WAN").words, (("access-rule",),)) == 2
    assert match_anchor(_line("set security-services ips on").words, (("ips",),)) == 3
    assert match_anchor(_line("set config add ips on").words, (("ips",),)) is None


def test_match_anchor_only_at_line_start():
    line = _line("comment ips enable")
    assert match_anchor(line.words, (("ips",),)) is None


def test_scan_fields_missing_value():
    line = _line("access-rule name from WAN")
    fields, _ = scan_fields(line, 1, {"name": "rule_name", "from": "source_zone"})
    assert fields == {"source_zone": "WAN"}


def test_scan_fields_last_occurrence_wins():
    line = _line("access-rule from LAN from WAN disable enable")
    fields, flag = scan_fields(line, 1, {"from": "source_zone"}, {"disable": False, "enable": True})
    assert fields == {"source_zone": "WAN"}
    assert flag is True


def test_find_state_window():
    assert find_state(("ips", "enable"), 1) is True
    assert find_state(("ips", "mode", "inline", "disable"), 1) is False
    assert find_state(("ips", "a", "b", "c", "enable"), 1) is None


def test_parse_port():
    assert parse_port("8443", 443) == 8443
    assert parse_port("abc", 443) == 443
    assert parse_port("0", 443) == 443
    assert parse_port("70000", 443) == 443
    assert parse_port(None, 443) == 443
    assert parse_port(" 8443 ", 443) == 8443
    assert parse_port("8_443", 443) == 443
    assert parse_port("+443", 443) == 443
    assert parse_port("٤٤٣", 443) == 443
