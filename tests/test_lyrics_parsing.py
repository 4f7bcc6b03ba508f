from lrclib_lyrics.lyrics.model import KaraokeWord, LyricLine
from lrclib_lyrics.lyrics.parse import parse_lyrics, parse_lyrics_with_stats, parse_time


def test_parse_empty():
    doc = parse_lyrics("")
    assert doc.unsynced == ()
    assert doc.synced is None
    assert doc.karaoke is None


def test_parse_blank_only():
    doc = parse_lyrics("  \n\n \t\n")
    assert doc.unsynced == ()
    assert doc.synced is None
    assert doc.karaoke is None


def test_parse_synced():
    doc = parse_lyrics("[00:27.93] Listen to the wind blow\n[00:30.88] Watch the sun rise")
    assert doc.synced == (
        LyricLine("Listen to the wind blow", 27930),
        LyricLine("Watch the sun rise", 30880),
    )
    assert doc.unsynced == (LyricLine("Listen to the wind blow"), LyricLine("Watch the sun rise"))
    assert doc.karaoke is None


def test_parse_plain_keeps_stanza_breaks():
    doc = parse_lyrics("Line 1\nLine 2\n\nLine 3\n")
    assert [ln.text for ln in doc.unsynced] == ["Line 1", "Line 2", "♪", "Line 3"]
    assert all(ln.start_time is None for ln in doc.unsynced)
    assert doc.synced is None


def test_metadata_tags_removed():
    doc = parse_lyrics("[ar:Fleetwood Mac]\n[ti:The Chain]\n[length: 04:31]\n[00:27.93] Listen to the wind blow\n")
    assert doc.synced == (LyricLine("Listen to the wind blow", 27930),)
    assert doc.unsynced == (LyricLine("Listen to the wind blow"),)


def test_empty_line_becomes_placeholder():
    doc = parse_lyrics("[00:01.00] a\n[00:02.00]\n[00:03.00] b")
    assert [ln.text for ln in doc.synced] == ["a", "♪", "b"]
    assert [ln.text for ln in doc.unsynced] == ["a", "♪", "b"]
    assert doc.synced[1].start_time == 2000


def test_custom_placeholder():
    doc = parse_lyrics("[00:01.00] a\n[00:02.00]   ", placeholder="...")
    assert doc.synced[1] == LyricLine("...", 2000)


def test_first_line_decides_mode():
    doc = parse_lyrics("Intro without timing\n[00:01.00] timed line")
    assert doc.synced is None
    assert len(doc.unsynced) == 2


def test_detected_mode_without_lines_is_empty_not_none():
    # first line has a timestamp deeper in the text, not a leading one
    doc = parse_lyrics("say [00:01.00] hi")
    assert doc.synced == ()
    assert doc.unsynced == (LyricLine("say [00:01.00] hi"),)


def test_multiple_leading_timestamps_use_first():
    doc = parse_lyrics("[00:01.00][00:02.5]hey\n")
    assert doc.synced == (LyricLine("hey", 1000),)


def test_literal_brackets_survive():
    doc = parse_lyrics("[00:01.00] [Chorus] <3 you\n[00:02.00] a < b > c")
    assert [ln.text for ln in doc.synced] == ["[Chorus] <3 you", "a < b > c"]


def test_garbage_never_raises():
    doc = parse_lyrics("[[[<<<>>>]]]")
    assert doc.unsynced == (LyricLine("[[[<<<>>>]]]"),)
    assert doc.synced is None
    assert doc.karaoke is None


def test_crlf_lines():
    doc = parse_lyrics("[00:01.00] a\r\n[00:02.00] b\r\n")
    assert [ln.text for ln in doc.synced] == ["a", "b"]


def test_karaoke_relative_times():
    doc = parse_lyrics("[00:00.50]the<00:01.00> quick<00:01.50> brown<00:02.00>")
    assert doc.karaoke is not None
    (line,) = doc.karaoke
    assert line.start_time == 500
    assert line.words == (
        KaraokeWord("the", 500),
        KaraokeWord("quick", 500),
        KaraokeWord("brown", 500),
    )
    # same source line also feeds synced and unsynced
    assert doc.synced == (LyricLine("the quick brown", 500),)
    assert doc.unsynced == (LyricLine("the quick brown"),)


def test_karaoke_trailing_word_borrows_next_line_start():
    doc = parse_lyrics("[00:01.00]hello<00:01.40> world\n\n[00:02.00]next<00:02.50>")
    first, second = doc.karaoke
    assert first.words == (KaraokeWord("hello", 400), KaraokeWord("world", 600))
    assert second.words == (KaraokeWord("next", 500),)
    assert second.start_time == 2000


def test_karaoke_trailing_word_on_last_line():
    doc = parse_lyrics("[00:01.00]a<00:01.20> b")
    (line,) = doc.karaoke
    assert line.words == (KaraokeWord("a", 200), KaraokeWord("b", 0))


def test_karaoke_without_line_timestamp():
    doc = parse_lyrics("one<00:00.30> two<00:00.80>")
    assert doc.synced is None
    (line,) = doc.karaoke
    assert line.start_time == 0
    assert [w.relative_time for w in line.words] == [300, 500]


def test_parse_time():
    assert parse_time("00:27.93") == 27930
    assert parse_time("01:02") == 62000
    assert parse_time("1:2.5") == 62500
    assert parse_time("00:01.2345") == 1234
    assert parse_time("abc") is None
    assert parse_time("") is None


def test_parse_with_stats():
    doc, stats = parse_lyrics_with_stats("[00:01.00]a<00:01.50> b<00:02.00>\n[00:03.00]\nplain")
    assert stats.lines_total == 3
    assert stats.lines_with_timestamps == 2
    assert stats.placeholder_lines == 1
    # the untimed last line still yields one word in karaoke mode
    assert stats.karaoke_words == 3
    assert len(doc.unsynced) == 3


def test_first_line_decides_karaoke_mode():
    doc = parse_lyrics("[00:01.00] plain\n[00:02.00]a<00:02.50> b<00:03.00>")
    assert doc.karaoke is None
    assert [ln.text for ln in doc.synced] == ["plain", "a b"]
