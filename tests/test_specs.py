from secstruc.specs import CA_SPEC, DEFAULT_METHOD, HBONDS_SPEC, METHOD_SPECS, normalize_method
from secstruc.errors import BackboneError, InputError, SecstrucError


def test_normalize_method_default():
    assert normalize_method(None) == DEFAULT_METHOD == "hbonds"


def test_normalize_method_aliases():
    assert normalize_method(" DSSP ") == "hbonds"
    assert normalize_method("hb") == "hbonds"
    assert normalize_method("geometry") == "ca"


def test_method_specs():
    assert METHOD_SPECS["hbonds"] is HBONDS_SPEC
    assert HBONDS_SPEC.needs_full_backbone
    assert not CA_SPEC.needs_full_backbone


def test_normalize_method_invalid():
    try:
        normalize_method("stride")
    except InputError as exc:
        assert "stride" in str(exc)
        return
    raise AssertionError("Expected InputError for unknown method")


def test_error_hierarchy():
    assert issubclass(InputError, SecstrucError)
    assert issubclass(InputError, ValueError)
    assert issubclass(BackboneError, SecstrucError)
    assert issubclass(BackboneError, RuntimeError)
