"""
Pytest configuration and shared PDF fixtures.
"""
import pytest


def build_pdf(content: bytes, width: int = 612, height: int = 792) -> bytes:
    """Build a one-page PDF whose content stream is `content` (Helvetica as /F1)."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        (
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 %d %d] "
            b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>" % (width, height)
        ),
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def text_pdf(tmp_path):
    """Born-digital single page containing 'Hello World'."""
    path = tmp_path / "hello.pdf"
    path.write_bytes(build_pdf(b"BT /F1 24 Tf 72 700 Td (Hello World) Tj ET"))
    return str(path)


@pytest.fixture
def blank_pdf(tmp_path):
    path = tmp_path / "blank.pdf"
    path.write_bytes(build_pdf(b""))
    return str(path)


@pytest.fixture
def corrupt_pdf(tmp_path):
    path = tmp_path / "corrupt.pdf"
    path.write_bytes(b"this is not a pdf at all\x00\x01\x02")
    return str(path)


@pytest.fixture
def scanned_pdf(tmp_path):
    """Image-only single page with the text 'INVOICE #42' (no text layer)."""
    from PIL import Image, ImageDraw, ImageFont

    img = Image.new("RGB", (1275, 1650), color="white")
    draw = ImageDraw.Draw(img)
    draw.text((150, 300), "INVOICE #42", fill="black", font=ImageFont.load_default(size=96))
    path = tmp_path / "scanned.pdf"
    img.save(path, "PDF", resolution=150.0)
    return str(path)
