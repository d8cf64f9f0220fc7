import pytest

from texloader.errors import ResultCode, TextureLoaderError
from texloader.formats import TextureFormat
from texloader.ktx1 import HEADER_LENGTH, Ktx1TextureLoaderFactory
from texloader.types import TextureType

from tests.conftest import bc1_header, build_ktx1, rgba8_header


@pytest.fixture
def factory():
    return Ktx1TextureLoaderFactory()


def test_single_level_2d(factory, rgba8_4x4):
    loader = factory.try_create(rgba8_4x4)

    desc = loader.descriptor
    assert desc.type == TextureType.TWO_D
    assert desc.format == TextureFormat.RGBA_UNORM8
    assert (desc.width, desc.height, desc.depth) == (4, 4, 1)
    assert desc.num_mip_levels == 1
    assert len(loader.mip_level_data) == 1
    assert loader.mip_level_data[0].length == 4 * 4 * 4
    assert loader.mip_level_data[0].offset == HEADER_LENGTH + 4
    assert not loader.should_generate_mipmaps()
    assert loader.can_upload_source_data()


def test_zero_mip_count_means_generate_mipmaps(factory):
    loader = factory.try_create(build_ktx1(rgba8_header(number_of_mipmap_levels=0)))

    assert loader.descriptor.num_mip_levels == 1
    assert len(loader.mip_level_data) == 1
    assert loader.should_generate_mipmaps()


@pytest.mark.parametrize("cube_prefix", ["face", "all"])
def test_cube_accepts_face_or_full_prefix(factory, cube_prefix):
    header = rgba8_header(pixel_width=8, pixel_height=8, number_of_faces=6)
    loader = factory.try_create(build_ktx1(header, cube_prefix=cube_prefix))

    assert loader.descriptor.type == TextureType.CUBE
    assert loader.descriptor.depth == 1
    assert [m.length for m in loader.mip_level_data] == [8 * 8 * 4 * 6]


def test_cube_must_be_square(factory):
    header = rgba8_header(pixel_width=8, pixel_height=16, number_of_faces=6)
    with pytest.raises(TextureLoaderError, match="pixelWidth must match pixelHeight"):
        factory.try_create(build_ktx1(header))


def test_cube_must_have_zero_depth(factory):
    header = rgba8_header(pixel_width=8, pixel_height=8, pixel_depth=1, number_of_faces=6)
    with pytest.raises(TextureLoaderError, match="pixelDepth must be 0"):
        factory.try_create(build_ktx1(header))


def test_rejects_unexpected_image_size(factory):
    header = rgba8_header(number_of_mipmap_levels=3)
    data = build_ktx1(header, image_sizes=[64, 17, 4])

    with pytest.raises(TextureLoaderError, match="Unexpected image size for mip level 1") as exc:
        factory.try_create(data)
    assert exc.value.code == ResultCode.INVALID_OPERATION


def test_cube_rejects_prefix_matching_neither_size(factory):
    header = rgba8_header(pixel_width=8, pixel_height=8, number_of_faces=6)
    with pytest.raises(TextureLoaderError, match="Unexpected image size"):
        factory.try_create(build_ktx1(header, image_sizes=[8 * 8 * 4 * 2]))


def test_non_cube_rejects_six_face_prefix(factory):
    with pytest.raises(TextureLoaderError, match="Unexpected image size"):
        factory.try_create(build_ktx1(rgba8_header(), image_sizes=[64 * 6]))


def test_rejects_bad_face_count(factory):
    with pytest.raises(TextureLoaderError, match="numberOfFaces must be 1 or 6"):
        factory.try_create(build_ktx1(rgba8_header(number_of_faces=3)))


def test_rejects_key_value_block_larger_than_buffer(factory, rgba8_4x4):
    header = rgba8_header(bytes_of_key_value_data=10_000)
    data = header.pack() + rgba8_4x4[HEADER_LENGTH:]
    with pytest.raises(TextureLoaderError, match="Length is too short"):
        factory.try_create(data)


def test_rejects_truncated_payload(factory, rgba8_4x4):
    with pytest.raises(TextureLoaderError, match="Length is too short"):
        factory.try_create(rgba8_4x4[: HEADER_LENGTH + 10])


def test_rejects_missing_trailing_bytes(factory, rgba8_4x4):
    with pytest.raises(TextureLoaderError, match="Length shorter than expected length"):
        factory.try_create(rgba8_4x4[:-2])


def test_rejects_more_mips_than_dimensions_allow(factory):
    with pytest.raises(TextureLoaderError, match="exceeds the mip chain"):
        factory.try_create(build_ktx1(rgba8_header(number_of_mipmap_levels=4)))


def test_rejects_before_extraction_when_validator_fails(factory):
    header = rgba8_header(number_of_faces=6, number_of_array_elements=2, pixel_height=4)
    with pytest.raises(TextureLoaderError, match="cube arrays"):
        factory.try_create(header.pack() + b"\x00" * 256)


def test_rejects_3d_arrays_before_extraction(factory):
    header = rgba8_header(pixel_depth=2, number_of_array_elements=2)
    with pytest.raises(TextureLoaderError, match="3D texture arrays") as exc:
        factory.try_create(header.pack() + b"\x00" * 512)
    assert exc.value.code == ResultCode.INVALID_OPERATION


def test_rejects_none(factory):
    with pytest.raises(TextureLoaderError) as exc:
        factory.try_create(None)
    assert exc.value.code == ResultCode.ARGUMENT_INVALID


def test_key_value_block_is_skipped(factory):
    data = build_ktx1(rgba8_header(), key_value_data=b"\x07" * 12)
    loader = factory.try_create(data)

    mip = loader.mip_level_data[0]
    assert mip.offset == HEADER_LENGTH + 12 + 4
    assert bytes(mip.data) == b"\x01" * 64


def test_array_texture(factory):
    header = rgba8_header(number_of_array_elements=3, number_of_mipmap_levels=2)
    loader = factory.try_create(build_ktx1(header))

    assert loader.descriptor.type == TextureType.TWO_D_ARRAY
    assert loader.descriptor.num_layers == 3
    assert [m.length for m in loader.mip_level_data] == [64 * 3, 16 * 3]


def test_3d_texture(factory):
    header = rgba8_header(pixel_depth=4, number_of_mipmap_levels=3)
    loader = factory.try_create(build_ktx1(header))

    assert loader.descriptor.type == TextureType.THREE_D
    assert [m.length for m in loader.mip_level_data] == [256, 32, 4]


def test_block_compressed_mip_chain(factory):
    loader = factory.try_create(build_ktx1(bc1_header(number_of_mipmap_levels=4)))

    assert loader.descriptor.format == TextureFormat.BC1_RGBA
    # 8x8 is 2x2 blocks; every smaller level still needs one whole block.
    assert [m.length for m in loader.mip_level_data] == [32, 8, 8, 8]


@pytest.mark.parametrize(
    "fields",
    [
        dict(pixel_width=16, pixel_height=8, number_of_mipmap_levels=5),
        dict(pixel_width=5, pixel_height=3, number_of_mipmap_levels=3),
        dict(pixel_width=8, pixel_height=8, pixel_depth=2, number_of_mipmap_levels=4),
        dict(pixel_width=4, pixel_height=0, number_of_mipmap_levels=3),
        dict(pixel_width=8, pixel_height=8, number_of_faces=6, number_of_mipmap_levels=4),
        dict(pixel_width=4, pixel_height=4, number_of_array_elements=2, number_of_mipmap_levels=2),
    ],
)
def test_records_cover_whole_shape(factory, fields):
    loader = factory.try_create(build_ktx1(rgba8_header(**fields)))

    total = sum(m.length for m in loader.mip_level_data)
    assert total == loader.memory_size_in_bytes


def test_records_borrow_the_source(factory, rgba8_4x4):
    source = bytearray(rgba8_4x4)
    loader = factory.try_create(source)
    mip = loader.mip_level_data[0]

    source[mip.offset] = 0xEE
    assert mip.data[0] == 0xEE
    assert mip.data.readonly


def test_trailing_bytes_are_ignored(factory, rgba8_4x4):
    loader = factory.try_create(rgba8_4x4 + b"\x00" * 32)
    assert len(loader.mip_level_data) == 1


def test_cube_mip_chain_walks_face_major(factory):
    header = rgba8_header(pixel_width=4, pixel_height=4, number_of_faces=6, number_of_mipmap_levels=2)
    loader = factory.try_create(build_ktx1(header))

    first, second = loader.mip_level_data
    assert first.length == 64 * 6
    assert second.length == 16 * 6
    assert second.offset == first.offset + first.length + 4
    assert bytes(second.data) == b"\x02" * (16 * 6)
