import numpy as np

from encore.audio.resampling import RateStepper, resample_to_length


def test_resample_stretches_and_squeezes_blocks():
    block = np.array([[0.0, 1.0], [1.0, 0.0]], dtype=np.float32)

    stretched = resample_to_length(block, 3)
    assert stretched.shape == (3, 2)
    assert stretched.dtype == np.float32
    assert np.allclose(stretched[:, 0], [0.0, 0.5, 1.0])

    squeezed = resample_to_length(np.zeros((8, 1), dtype=np.float32), 4)
    assert squeezed.shape == (4, 1)


def test_resample_edge_cases():
    block = np.ones((4, 2), dtype=np.float32)

    assert resample_to_length(block, 4) is block
    assert resample_to_length(block, 0).shape == (0, 2)
    assert resample_to_length(block[:1], 3).shape == (3, 2)


def test_rate_stepper_carries_fractional_frames():
    stepper = RateStepper(1.5)

    reads = [stepper.source_frames(3) for _ in range(2)]

    assert reads == [4, 5]
    assert sum(reads) == 9

    stepper.rate = 2.0
    assert stepper.source_frames(100) == 200
