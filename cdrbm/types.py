"""This module uses jaxtyping to add various more specific tensor types."""
from typing import TypeAlias, Union

import numpy as np
from jaxtyping import Float
from torch import Tensor


VisibleFloat: TypeAlias = Float[Tensor, "visible"]
VisibleBatchFloat: TypeAlias = Float[Tensor, "batch visible"]
HiddenBatchFloat: TypeAlias = Float[Tensor, "batch hidden"]

# bias-augmented versions carry one extra leading column for the bias unit
AugmentedFloat: TypeAlias = Float[Tensor, "units_plus_bias"]
AugmentedBatchFloat: TypeAlias = Float[Tensor, "batch units_plus_bias"]

WeightMatrixFloat: TypeAlias = Float[Tensor, "visible_plus_bias hidden_plus_bias"]
ScalarFloat: TypeAlias = Float[Tensor, ""]

# whatever callers may hand us as a sample matrix
MatrixLike = Union[Tensor, np.ndarray, list[list[float]], tuple[tuple[float, ...], ...]]
