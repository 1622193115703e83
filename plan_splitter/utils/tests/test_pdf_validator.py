"""
Tests for source document pre-checks
"""

from plan_splitter.utils.pdf_validator import check_source_bytes


class TestCheckSourceBytes:

    def test_valid_pdf(self, make_pdf):
        is_valid, message = check_source_bytes(make_pdf(1))
        assert is_valid
        assert message.startswith("PDF header found")

    def test_empty_content(self):
        assert check_source_bytes(b"") == (False, "source document is empty")

    def test_not_a_pdf(self):
        is_valid, message = check_source_bytes(b"PK\x03\x04 zip archive")
        assert not is_valid
        assert message == "no PDF header in the first 1024 bytes"

    def test_junk_before_header_is_accepted(self):
        is_valid, _ = check_source_bytes(b"\x00\x00\r\n%PDF-1.7\n1 0 obj\n%%EOF")
        assert is_valid

    def test_size_limit(self):
        content = b"%PDF-1.4\n" + b"0" * (1024 * 1024 + 10)
        is_valid, message = check_source_bytes(content, max_file_size_mb=1)
        assert not is_valid
        assert "limit is 1MB" in message

    def test_encrypt_keyword_is_left_to_the_parser(self):
        is_valid, _ = check_source_bytes(b"%PDF-1.4\n/Encrypt 5 0 R\n%%EOF")
        assert is_valid

    def test_messages_do_not_name_the_file(self, make_pdf):
        for content in (b"", b"plain text", make_pdf(1)):
            assert ".pdf" not in check_source_bytes(content)[1]

    def test_missing_eof_warns(self, caplog):
        is_valid, _ = check_source_bytes(b"%PDF-1.4\n1 0 obj")
        assert is_valid
        assert "no EOF marker" in caplog.text
