from blockthetweet.utils.fingerprint import fingerprint


def test_empty_string_matches_xxh64_reference():
    assert fingerprint("") == 0xEF46DB3751D8E999


def test_stable_across_calls():
    assert fingerprint("hello world") == fingerprint("hello world")


def test_unsigned_64_bit():
    for text in ["", "hello world", "ünïcödé", "a" * 10000]:
        assert 0 <= fingerprint(text) < 2 ** 64


def test_str_and_utf8_bytes_agree():
    assert fingerprint("ünïcödé") == fingerprint("ünïcödé".encode("utf-8"))


def test_different_text_differs():
    assert fingerprint("hello world") != fingerprint("hello world ")
    assert fingerprint("Hello") != fingerprint("hello")