import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from gvas import (
    FormatError,
    GvasError,
    PropertyType,
    StructuralViolation,
    TruncatedInput,
    Vector,
    parse_gvas,
    parse_gvas_file,
)

from . import builders as b


def test_minimal_document(minimal_save):
    gvas = parse_gvas(minimal_save)
    assert gvas.order == ["X"]
    assert gvas.types == {"X": PropertyType.INT}
    assert gvas.ints == {"X": 42}
    assert gvas["X"] == 42
    assert gvas.diagnostics == []


def test_wrong_magic(minimal_save):
    with pytest.raises(FormatError):
        parse_gvas(b"GVBS" + minimal_save[4:])


def test_unsupported_version(minimal_save):
    data = minimal_save[:4] + b.u32(1) + minimal_save[8:]
    with pytest.raises(FormatError, match="version 1"):
        parse_gvas(data)


def test_trailing_data(minimal_save):
    with pytest.raises(StructuralViolation, match="extra data") as excinfo:
        parse_gvas(minimal_save + b"\x00")
    assert excinfo.value.position == len(minimal_save)


def test_missing_terminator():
    data = b.header() + b.int_prop("X", 42)
    with pytest.raises(TruncatedInput):
        parse_gvas(data)


def test_empty_document():
    gvas = parse_gvas(b.document())
    assert gvas.order == []
    assert len(gvas) == 0


def test_accepts_bytearray(minimal_save):
    assert parse_gvas(bytearray(minimal_save)).ints == {"X": 42}


def test_duplicate_property_name():
    first = b.int_prop("X", 1)
    data = b.document(first, b.int_prop("X", 2))
    with pytest.raises(StructuralViolation, match="duplicate property") as excinfo:
        parse_gvas(data)
    assert excinfo.value.field == "X"
    assert excinfo.value.position == len(b.header()) + len(first)


def test_mixed_document_keeps_order_and_buckets():
    data = b.document(
        b.str_prop("SaveGameVersion", "220127"),
        b.bool_prop("bIsDay", 1),
        b.float_prop("TimeOfDay", 0.75),
        b.array_prop("SplineIds", "IntProperty", b.int_array([3, 1, 2])),
        b.array_prop("Names", "StrProperty", b.string_array(["a", None])),
        b.array_prop("Labels", "TextProperty", b.text_array([b.text_simple(["x"])])),
        b.array_prop("Flags", "BoolProperty", b.bool_array([0, 1])),
        b.array_prop("Weights", "FloatProperty", b.float_array([1.0])),
        b.struct_array("Points", "Vector", [b.geometry(1.0, 2.0, 3.0)], 1),
        b.struct_array("Rots", "Rotator", [b.geometry(0.0, 45.0, 0.0)], 1),
        b.struct_array("Frames", "Transform", [b.transform()], 1),
        b.array_prop("Blob", "ByteProperty", b.u32(1) + b"\x05"),
        b.vector_prop("Origin", (0.0, 0.0, 1.0)),
        b.quat_prop("Facing", (0.0, 0.0, 0.0, 1.0)),
        b.int_prop("Money", 100),
    )
    gvas = parse_gvas(data)

    assert gvas.order == [
        "SaveGameVersion", "bIsDay", "TimeOfDay", "SplineIds", "Names", "Labels",
        "Flags", "Weights", "Points", "Rots", "Frames", "Blob", "Origin", "Facing",
        "Money",
    ]
    assert len(set(gvas.order)) == len(gvas.order)
    assert gvas.strings == {"SaveGameVersion": "220127"}
    assert gvas.bools == {"bIsDay": True}
    assert gvas.floats == {"TimeOfDay": 0.75}
    assert gvas.int_arrays == {"SplineIds": [3, 1, 2]}
    assert gvas.string_arrays == {"Names": ["a", None]}
    assert gvas.text_arrays == {"Labels": [["x"]]}
    assert gvas.bool_arrays == {"Flags": [False, True]}
    assert gvas.float_arrays == {"Weights": [1.0]}
    assert gvas.vector_arrays == {"Points": [Vector(1.0, 2.0, 3.0)]}
    assert list(gvas.rotator_arrays) == ["Rots"]
    assert list(gvas.transform_arrays) == ["Frames"]
    assert gvas.byte_arrays == {"Blob": [1, 0, 0, 0, 5]}
    assert gvas.vectors == {"Origin": Vector(0.0, 0.0, 1.0)}
    assert list(gvas.quats) == ["Facing"]
    assert gvas.ints == {"Money": 100}

    # Every name has one tag and lives in exactly the bucket for that tag
    for name in gvas.order:
        prop_type = gvas.types[name]
        holders = [t for t in PropertyType if name in gvas.bucket(t)]
        assert holders == [prop_type]
        assert getattr(gvas, prop_type.bucket)[name] == gvas[name]


def test_raw_type_tags_preserved():
    data = b.document(b.struct_array("Frames", "Transform", [b.transform()], 1))
    gvas = parse_gvas(data)
    assert gvas.types["Frames"].tags == ("ArrayProperty", "StructProperty", "Transform")


@pytest.mark.parametrize("version, lwc", [(2, False), (3, True)])
def test_geometry_width_follows_version(version, lwc):
    data = b.document(
        b.vector_prop("Origin", (1.0, 2.0, 3.0), lwc),
        b.struct_array("Frames", "Transform", [b.transform(lwc=lwc)], 1),
        version=version,
    )
    gvas = parse_gvas(data)
    assert gvas.large_world_coords is lwc
    assert gvas.vectors["Origin"] == Vector(1.0, 2.0, 3.0)
    assert gvas.transform_arrays["Frames"][0].scale3d == Vector(1.0, 1.0, 1.0)


def test_version_3_rejects_32bit_geometry():
    data = b.document(b.vector_prop("Origin", (1.0, 2.0, 3.0), lwc=False), version=3)
    with pytest.raises(StructuralViolation):
        parse_gvas(data)


def test_struct_array_field_size_mismatch_succeeds_with_diagnostic(caplog):
    elements = [b.geometry(1.0, 2.0, 3.0), b.geometry(4.0, 5.0, 6.0)]
    data = b.document(b.struct_array("Points", "Vector", elements, 2, field_size=1))
    with caplog.at_level(logging.WARNING, logger="gvas"):
        gvas = parse_gvas(data)
    assert gvas.vector_arrays["Points"] == [Vector(1.0, 2.0, 3.0), Vector(4.0, 5.0, 6.0)]
    assert len(gvas.diagnostics) == 1
    assert "Points" in gvas.diagnostics[0]
    assert "field size 1" in caplog.text


def test_injected_logger_receives_diagnostics(caplog):
    log = logging.getLogger("tests.save_loader")
    data = b.document(b.struct_array("Points", "Vector", [b.geometry(1.0, 2.0, 3.0)], 1, field_size=0))
    with caplog.at_level(logging.WARNING, logger="tests.save_loader"):
        parse_gvas(data, log)
    assert [r.name for r in caplog.records] == ["tests.save_loader"]


def test_diagnostics_are_per_document():
    bad = b.document(b.struct_array("Points", "Vector", [b.geometry(1.0, 2.0, 3.0)], 1, field_size=0))
    good = b.document(b.struct_array("Points", "Vector", [b.geometry(1.0, 2.0, 3.0)], 1))
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(parse_gvas, [bad, good] * 8))
    assert [len(r.diagnostics) for r in results] == [1, 0] * 8


def test_errors_share_base_class(minimal_save):
    with pytest.raises(GvasError):
        parse_gvas(minimal_save[:-3])
    with pytest.raises(ValueError):
        parse_gvas(b"")


def test_parse_gvas_file(tmp_path, minimal_save):
    path = tmp_path / "slot1.sav"
    path.write_bytes(minimal_save)
    assert parse_gvas_file(path).ints == {"X": 42}
    assert parse_gvas_file(str(path)).order == ["X"]
