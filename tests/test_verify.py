from PIL import Image

from conftest import FakeEncoder, FixedDecoder, MissingDecoder, needs_zbar
from qrlogo.api import generate_qrcode_image
from qrlogo.verify import ScanResult, scan, verify


def _image():
    return generate_qrcode_image("abc", 200, encoder=FakeEncoder())


def test_scan_success_is_timed():
    result = scan(_image(), FixedDecoder("abc", name="fake"))
    assert result.success
    assert result.decoded_data == "abc"
    assert result.decoder == "fake"
    assert result.decode_time_ms >= 0


def test_scan_failure_reports_error():
    result = scan(_image(), MissingDecoder())
    assert not result.success
    assert result.decoded_data is None
    assert "nothing here" in result.error


def test_verify_runs_every_decoder():
    results = verify(_image(), decoders=[MissingDecoder(), FixedDecoder("abc")])
    assert [r.success for r in results] == [False, True]


def test_verify_flags_mismatch():
    [result] = verify(_image(), expected_data="xyz", decoders=[FixedDecoder("abc")])
    assert not result.success
    assert "mismatch" in result.error


def test_scan_result_defaults():
    r = ScanResult(success=False)
    assert r.decoded_data is None and r.error is None


@needs_zbar
def test_default_decoders_read_real_code(logo_image):
    img = generate_qrcode_image("abc", 400, logo_image)
    results = verify(img, expected_data="abc")
    assert [r.decoder for r in results] == ["pyzbar/zbar", "opencv"]
    assert results[0].success


def test_missing_zbar_is_a_failed_row(no_zbar, logo_image):
    results = verify(generate_qrcode_image("abc", 400, logo_image), expected_data="abc")
    assert [r.success for r in results] == [False, True]
    assert "ZBar library unavailable" in results[0].error
    assert results[1].decoded_data == "abc"


def test_blank_image_fails_with_fakes():
    blank = Image.new("RGB", (40, 40), (255, 255, 255))
    [result] = verify(blank, decoders=[FixedDecoder("abc")])
    assert not result.success
