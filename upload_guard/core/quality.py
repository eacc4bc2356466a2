import cv2
import logging
import numpy as np
from PIL import Image
from typing import Optional

# 4-neighbour discrete Laplacian
LAPLACIAN_KERNEL = np.array(
    [[0, -1, 0],
     [-1, 4, -1],
     [0, -1, 0]],
    dtype=np.float32,
)
EDGE_BIAS = 128
WORKING_SIZE = 300

class QualityChecker:
    def __init__(self, working_size: int = WORKING_SIZE):
        self.working_size = working_size

    def working_dimensions(self, width: int, height: int):
        """
        Scale (width, height) so it fits inside working_size x working_size
        with the longer side touching the box. Small images are enlarged.
        """
        scale = min(self.working_size / width, self.working_size / height)
        return max(1, round(width * scale)), max(1, round(height * scale))

    def sample(self, image: Image.Image) -> np.ndarray:
        """Grayscale copy fitted inside working_size x working_size (uint8)."""
        with image.convert("L") as gray:
            size = self.working_dimensions(*gray.size)
            if size != gray.size:
                with gray.resize(size, Image.Resampling.LANCZOS) as fitted:
                    return np.asarray(fitted, dtype=np.uint8).copy()
            return np.asarray(gray, dtype=np.uint8).copy()

    @staticmethod
    def edge_response(sample: np.ndarray) -> np.ndarray:
        """
        Laplacian of the intensity grid, biased by 128 and clipped to the
        uint8 range. Borders replicate the edge pixel.
        """
        response = cv2.filter2D(
            sample, cv2.CV_32F, LAPLACIAN_KERNEL, borderType=cv2.BORDER_REPLICATE
        )
        return np.clip(response + EDGE_BIAS, 0, 255).astype(np.uint8)

    @staticmethod
    def laplacian_variance(edge_map: np.ndarray) -> float:
        """Population variance: mean of squares minus squared mean."""
        values = edge_map.astype(np.float64)
        mean = values.mean()
        return float((values * values).mean() - mean * mean)

    def calculate_blur_score(self, image: Image.Image) -> float:
        """
        Calculate the sharpness score using the Variance of Laplacian method.
        Higher score means sharper image.
        """
        sample = self.sample(image)
        edge_map = self.edge_response(sample)
        return self.laplacian_variance(edge_map)

    def score_or_none(self, image: Image.Image) -> Optional[float]:
        """
        Same as calculate_blur_score, but any failure is logged and
        reported as None instead of raised.
        """
        try:
            return self.calculate_blur_score(image)
        except Exception as e:
            logging.warning(f"Blur detection failed: {e}")
            return None

    @staticmethod
    def is_sharp(score: float, threshold: float = 1000.0) -> bool:
        """Check if a score clears the blur threshold."""
        return score >= threshold
