"""Transform class for affine 3D transformations."""

from __future__ import annotations

from enum import Enum
from typing import Self

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import DegenerateGeometry, ValidationError
from .vectors import (
    EPSILON,
    affine,
    axis_angle_matrix,
    euler_matrix,
    frozen,
    invert,
    normalize,
    transform_points,
)


def _vector(value: ArrayLike, field: str, shape: str, fill_z: float = 0.0) -> NDArray[np.float64]:
    """Parse a finite 2D or 3D vector; a missing z becomes `fill_z`."""
    try:
        arr = np.asarray(value, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError):
        raise ValidationError(f"must be a numeric vector, got {value!r}", field=field, shape=shape) from None
    if arr.shape == (2,):
        arr = np.array([arr[0], arr[1], fill_z])
    if arr.shape != (3,):
        raise ValidationError(f"must be a 2D or 3D vector, got {value!r}", field=field, shape=shape)
    if not np.all(np.isfinite(arr)):
        raise ValidationError(f"must be finite, got {value!r}", field=field, shape=shape)
    return arr


def _number(value: float, field: str, shape: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"must be a number, got {value!r}", field=field, shape=shape) from None
    if not np.isfinite(number):
        raise ValidationError(f"must be finite, got {value!r}", field=field, shape=shape)
    return number


class TransformKind(Enum):
    """Where a transform came from; decides how it is written out."""

    TRANSLATE = "translate"
    ROTATE = "rotate"
    EULER = "euler"
    SCALE = "scale"
    MIRROR = "mirror"
    MATRIX = "multmatrix"


class Transform:
    """A 4x4 affine matrix tagged with its provenance.

    Transforms are immutable. The matrix is stored read-only and `params`
    keeps the arguments the transform was built from so that the serializer
    can write `translate(v=...)` instead of a raw `multmatrix(...)`:

    - TRANSLATE: (x, y, z)
    - ROTATE: (degrees, axis_x, axis_y, axis_z)
    - EULER: (x_degrees, y_degrees, z_degrees)
    - SCALE: (x, y, z)
    - MIRROR: (nx, ny, nz)
    - MATRIX: ()

    Composition follows matrix multiplication order: ``a @ b`` applies ``b``
    first and then ``a``, which is the same as the nested script
    ``a() { b() { child } }``.
    """

    __slots__ = ("_matrix", "_kind", "_params")

    def __init__(
        self,
        matrix: ArrayLike | None = None,
        kind: TransformKind = TransformKind.MATRIX,
        params: tuple[float, ...] = (),
    ) -> None:
        try:
            m = np.eye(4) if matrix is None else np.asarray(matrix, dtype=np.float64)
        except (TypeError, ValueError):
            raise ValidationError(f"must be a numeric matrix, got {matrix!r}",
                                  field="m", shape="multmatrix") from None
        if m.shape != (4, 4):
            raise ValidationError(f"must be 4x4, got shape {m.shape}", field="m", shape="multmatrix")
        if not np.all(np.isfinite(m)):
            raise ValidationError("must be finite", field="m", shape="multmatrix")
        self._matrix = frozen(m)
        self._kind = kind
        self._params = tuple(float(p) for p in params)

    @property
    def matrix(self) -> NDArray[np.float64]:
        return self._matrix

    @property
    def kind(self) -> TransformKind:
        return self._kind

    @property
    def params(self) -> tuple[float, ...]:
        return self._params

    # Named constructors

    @classmethod
    def identity(cls) -> Self:
        """Create an identity transform (a zero translation)."""
        return cls.translate((0.0, 0.0, 0.0))

    @classmethod
    def translate(cls, v: ArrayLike) -> Self:
        offset = _vector(v, "v", "translate")
        return cls(affine(translation=offset), TransformKind.TRANSLATE, tuple(offset))

    @classmethod
    def rotate(cls, axis: ArrayLike, degrees: float) -> Self:
        """Rotation of `degrees` about `axis` (right-hand rule).

        Raises:
            ValidationError: If the angle or axis is not finite
            DegenerateGeometry: If the axis has zero length
        """
        axis_vec = _vector(axis, "v", "rotate")
        angle = _number(degrees, "a", "rotate")
        linear = axis_angle_matrix(axis_vec, angle)
        return cls(affine(linear), TransformKind.ROTATE, (angle, *axis_vec))

    @classmethod
    def euler(cls, angles: ArrayLike) -> Self:
        """Rotation about X, then Y, then Z (the script's `rotate([x, y, z])`)."""
        angles_vec = _vector(angles, "a", "rotate")
        return cls(affine(euler_matrix(angles_vec)), TransformKind.EULER, tuple(angles_vec))

    @classmethod
    def scale(cls, v: ArrayLike | float) -> Self:
        if np.isscalar(v):
            v = (v, v, v)
        factors = _vector(v, "v", "scale", fill_z=1.0)
        return cls(affine(np.diag(factors)), TransformKind.SCALE, tuple(factors))

    @classmethod
    def mirror(cls, normal: ArrayLike) -> Self:
        """Reflection across the plane through the origin with the given normal.

        Raises:
            DegenerateGeometry: If the normal has zero length
        """
        normal_vec = _vector(normal, "v", "mirror")
        n = normalize(normal_vec)
        linear = np.eye(3) - 2.0 * np.outer(n, n)
        return cls(affine(linear), TransformKind.MIRROR, tuple(normal_vec))

    @classmethod
    def from_matrix(cls, matrix: ArrayLike) -> Self:
        """Wrap a raw 3x3 linear or 4x4 affine matrix."""
        try:
            m = np.asarray(matrix, dtype=np.float64)
        except (TypeError, ValueError):
            raise ValidationError(f"must be a numeric matrix, got {matrix!r}",
                                  field="m", shape="multmatrix") from None
        if m.shape == (3, 3):
            m = affine(m)
        return cls(m, TransformKind.MATRIX)

    # Algebra

    def compose(self, inner: Transform) -> Transform:
        """Return the transform that applies `inner` first, then `self`."""
        if self._kind is TransformKind.TRANSLATE and inner.kind is TransformKind.TRANSLATE:
            return Transform.translate(np.add(self._params, inner.params))
        if self._kind is TransformKind.SCALE and inner.kind is TransformKind.SCALE:
            return Transform.scale(np.multiply(self._params, inner.params))
        return Transform.from_matrix(self._matrix @ inner.matrix)

    def __matmul__(self, other: Transform) -> Transform:
        """Combine two transforms via matrix multiplication."""
        return self.compose(other)

    def inverse(self) -> Transform:
        """Return the inverse transform.

        Raises:
            DegenerateGeometry: If the transform is singular
        """
        kind, params = self._kind, self._params
        if kind is TransformKind.TRANSLATE:
            return Transform.translate(np.negative(params))
        if kind is TransformKind.ROTATE:
            return Transform.rotate(params[1:], -params[0])
        if kind is TransformKind.MIRROR:
            return self
        if kind is TransformKind.SCALE:
            if any(abs(f) < EPSILON for f in params):
                raise DegenerateGeometry(f"Cannot invert scale {list(params)}")
            return Transform.scale(np.reciprocal(params))
        return Transform.from_matrix(invert(self._matrix))

    def apply(self, points: ArrayLike) -> NDArray[np.float64]:
        """Transform an (N, 3) array of points."""
        return transform_points(self._matrix, points)

    def is_identity(self, tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, np.eye(4), atol=tolerance))

    def almost_equal(self, other: Transform, tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, other.matrix, atol=tolerance))

    def __repr__(self) -> str:
        return f"Transform({self._kind.value}, params={list(self._params)})"


def compose(a: Transform, b: Transform) -> Transform:
    """Compose two transforms: the result applies `b` then `a`."""
    return a.compose(b)
