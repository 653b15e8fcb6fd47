import pytest

from classbox import AbstractErr, ArgErr, CastErr, ClassDefErr, Err


def raise_def_err():
    try:
        int("x")
    except ValueError as e:
        raise ClassDefErr("bad field", e)


def test_make_and_accessors():
    cause = KeyError("k")
    err = ArgErr.make("bad arg", cause)
    assert isinstance(err, ArgErr)
    assert err.msg() == "bad arg"
    assert err.cause() is cause
    assert err.__cause__ is cause
    assert str(err) == "ArgErr: bad arg"
    assert Err().msg() == ""
    assert Err().toStr() == "Err"


def test_trace_to_str():
    with pytest.raises(ClassDefErr) as info:
        raise_def_err()
    trace = info.value.traceToStr()
    lines = trace.splitlines()
    assert lines[0] == "ClassDefErr: bad field"
    assert "raise_def_err" in trace
    assert "Caused by: invalid literal for int()" in lines[-1]


def test_trace_to_str_without_traceback():
    err = CastErr("wrong type", ArgErr("inner", ValueError("root")))
    assert err.traceToStr().splitlines() == [
        "CastErr: wrong type",
        "  Caused by: ArgErr: inner",
        "  Caused by: root",
    ]


def test_python_error_families():
    assert issubclass(AbstractErr, TypeError)
    assert issubclass(CastErr, TypeError)
    assert issubclass(ArgErr, ValueError)
    assert not issubclass(ClassDefErr, TypeError)
