import numpy as np
import pytest

from bitstego.chunker import BitChunkSpec
from bitstego.errors import CapacityError, SecretTooLarge
from bitstego.lsb import Embedder, Extractor, LSBConfig, embed_lsb, extract_lsb


SECRET = b"Attack at dawn \xff\x00\x10"


@pytest.mark.parametrize("bits", range(1, 9))
def test_round_trip_every_width(bits, make_cover):
    cover = make_cover(12, 7)  # 252 bytes, not a multiple of 3
    spec = BitChunkSpec(bits)
    secret = SECRET[: spec.capacity_bytes(252)]
    stego = Embedder(cover, secret, spec).embed_image()
    assert stego.size == cover.size
    assert Extractor(stego, spec).extract() == secret


@pytest.mark.parametrize("bits", range(1, 9))
def test_low_bits_replaced_high_bits_kept(bits, make_cover):
    cover = make_cover()
    spec = BitChunkSpec(bits)
    embedder = Embedder(cover, b"\x81\x7e", spec)
    stego = embedder.embed()
    orig = np.array(cover)
    keep = 0xFF ^ spec.mask
    assert np.array_equal(stego & keep, orig & keep)
    assert np.array_equal(stego.reshape(-1) & spec.mask, embedder.chunk_stream())


def test_cover_not_mutated(rng):
    cover = rng.integers(0, 256, size=(5, 5, 3), dtype=np.uint8)
    before = cover.copy()
    stego = Embedder(cover, b"hi", BitChunkSpec(4)).embed()
    assert np.array_equal(cover, before)
    assert stego is not cover


def test_padding_scenario_full_byte_width(rng):
    cover = rng.integers(1, 256, size=100, dtype=np.uint8)
    secret = bytes(range(200, 210))
    embedder = Embedder(cover, secret, BitChunkSpec(8))
    assert embedder.zero_padding_count == 90
    stego = embedder.embed()
    assert not stego[:90].any()
    assert stego[90:].tobytes() == secret
    assert Extractor(stego, BitChunkSpec(8)).extract() == secret


def test_capacity_boundary_exact_fit(rng):
    cover = rng.integers(0, 256, size=(4, 4, 3), dtype=np.uint8)  # 48 bytes
    spec = BitChunkSpec(3)
    secret = b"\xff" + bytes(range(1, 16))  # 16 bytes * 3 chunks == 48
    embedder = Embedder(cover, secret, spec)
    assert embedder.zero_padding_count == 0
    assert Extractor(embedder.embed(), spec).extract() == secret


def test_capacity_boundary_one_over(rng):
    cover = rng.integers(0, 256, size=(4, 4, 3), dtype=np.uint8)
    with pytest.raises(SecretTooLarge) as exc:
        Embedder(cover, bytes(17), BitChunkSpec(3))
    assert isinstance(exc.value, CapacityError)
    assert exc.value.required == 51
    assert exc.value.available == 48


def test_alignment_when_first_chunks_are_zero(make_cover):
    # 0x01 at two bits is [0, 0, 0, 1]: data is detected three chunks late
    spec = BitChunkSpec(2)
    secret = b"\x01hello"
    stego = Embedder(make_cover(7, 5), secret, spec).embed()  # 105 bytes
    extractor = Extractor(stego, spec)
    assert extractor.extract() == secret
    assert extractor.start_index == 105 - len(secret) * 4 + 3


def test_alignment_with_padded_width(make_cover):
    spec = BitChunkSpec(3)
    secret = b"\x07abc"  # 0x07 -> [0, 1, 3]
    stego = Embedder(make_cover(7, 5), secret, spec).embed()
    assert Extractor(stego, spec).extract() == secret


def test_leading_zero_byte_is_lost(make_cover):
    # an all-zero first byte is indistinguishable from padding
    spec = BitChunkSpec(2)
    stego = Embedder(make_cover(), b"\x00AB", spec).embed()
    assert Extractor(stego, spec).extract() == b"AB"


def test_empty_secret(make_cover):
    spec = BitChunkSpec(2)
    embedder = Embedder(make_cover(), b"", spec)
    stego = embedder.embed()
    assert not (stego & spec.mask).any()
    extractor = Extractor(stego, spec)
    assert extractor.extract() == b""
    assert extractor.start_index == stego.size


def test_wrong_width_is_silent(make_cover):
    stego = Embedder(make_cover(), SECRET, BitChunkSpec(2)).embed()
    out = Extractor(stego, BitChunkSpec(4)).extract()
    assert out != SECRET


def test_non_uint8_buffer_rejected():
    with pytest.raises(ValueError):
        Embedder(np.zeros((2, 2, 3), dtype=np.int32), b"x", BitChunkSpec(2))


def test_rgba_cover_is_flattened_to_rgb(rng):
    from PIL import Image
    rgba = Image.fromarray(rng.integers(0, 256, size=(6, 6, 4), dtype=np.uint8))
    stego, info = embed_lsb(rgba, b"rgba", LSBConfig(bits=4))
    assert stego.mode == "RGB"
    assert info["capacity_chunks"] == 6 * 6 * 3
    assert extract_lsb(stego, LSBConfig(bits=4)) == b"rgba"


def test_embed_lsb_info(make_cover):
    stego, info = embed_lsb(make_cover(10, 10), b"abc", LSBConfig(bits=3))
    assert info["bits"] == 3
    assert info["chunks_per_byte"] == 3
    assert info["capacity_chunks"] == 300
    assert info["used_chunks"] == 9
    assert info["padding_chunks"] == 291
    assert info["payload_len"] == 3
    assert info["hist_kl"] >= 0.0
    assert extract_lsb(stego, LSBConfig(bits=3)) == b"abc"


def test_default_config_uses_two_bits():
    assert LSBConfig().bits == 2
    assert LSBConfig().spec() == BitChunkSpec(2)
