import pytest

from mip_benders.problem import ProblemData, garfinkel_nemhauser


def test_reference_instance_dimensions():
    P = garfinkel_nemhauser()
    assert (P.n, P.p, P.m) == (2, 2, 2)
    assert P.A1 == ((1.0, -3.0), (-1.0, -3.0))
    assert isinstance(P.c1[0], float)


def test_linear_algebra_helpers(gn_problem):
    P = gn_problem
    assert P.residual((0, 1)) == (1.0, 0.0)
    assert P.a1_transpose((0, 3)) == (-3.0, -9.0)
    assert P.objective_x((0, 1)) == -4.0
    assert P.b_dot((1, 1)) == -5.0


def test_problem_data_is_frozen(gn_problem):
    with pytest.raises(AttributeError):
        gn_problem.b = (0.0, 0.0)


@pytest.mark.parametrize(
    "kwargs, match",
    [
        (dict(c1=[1, 2, 3]), "columns"),
        (dict(c2=[1]), "columns"),
        (dict(b=[1, 2, 3]), "rows"),
        (dict(A1=[[1, 2], [3]]), "length"),
        (dict(A2=[]), "empty"),
        (dict(b=["a", "b"]), "numbers"),
    ],
)
def test_dimension_validation(kwargs, match):
    raw = garfinkel_nemhauser().as_dict()
    raw.update(kwargs)
    with pytest.raises(ValueError, match=match):
        ProblemData.from_mapping(raw)


def test_from_mapping_roundtrip_and_missing_key():
    P = garfinkel_nemhauser()
    assert ProblemData.from_mapping(P.as_dict()) == P
    raw = P.as_dict()
    del raw["A2"]
    with pytest.raises(ValueError, match="A2"):
        ProblemData.from_mapping(raw)
