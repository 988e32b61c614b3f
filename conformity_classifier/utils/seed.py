import os
import random

import numpy as np


def set_global_seed(seed: int) -> None:
    """Set random seed for reproducibility across libraries.

    The solver gets the same seed through ``random_state``; this covers
    everything that draws from the global generators.

    Args:
        seed: Integer seed value.
    """
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
