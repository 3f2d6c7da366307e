"""
Operation pipeline: a single-use image input plus an ordered operation list.

A Pipeline moves through three states:

    PENDING   source and operations held, nothing computed yet
    RESOLVED  apply_all() succeeded, the final buffer is held
    CONSUMED  the buffer was taken with get_image(), or apply_all() failed

Example:
    >>> pipeline = Pipeline(ImageInput(ColorSource(255, 0, 0, (64, 64))), [Rotate90()])
    >>> buffer = pipeline.apply_all().get_image()
"""

import logging
from enum import Enum

from imgpipe.core.buffer import PixelBuffer
from imgpipe.core.errors import InputAlreadyUsedError
from imgpipe.inputs.sources import ImageInput
from imgpipe.pipeline.operations import Operation, apply_operation

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    CONSUMED = "consumed"


class Pipeline:
    """
    Applies an ordered list of operations to a single image input.

    Operations run strictly left to right; each receives the buffer the
    previous one produced. The first failure aborts the run and nothing is
    kept.
    """

    def __init__(self, image_input: ImageInput, operations: list[Operation] | None = None):
        self.image_input: ImageInput | None = image_input
        self.operations: list[Operation] = list(operations or [])
        self.state = PipelineState.PENDING
        self._image: PixelBuffer | None = None

    def apply_all(self) -> "Pipeline":
        """
        Resolve the input and apply every operation.

        Returns:
            self, now RESOLVED

        Raises:
            InputAlreadyUsedError: If the pipeline has already been applied
            ImgPipeError: Whatever the failing step raised
        """
        if self.state != PipelineState.PENDING or self.image_input is None:
            raise InputAlreadyUsedError("Pipeline input has already been used")

        image_input, operations = self.image_input, self.operations
        self.image_input = None
        self.operations = []
        self.state = PipelineState.CONSUMED

        buffer = image_input.get_image()
        logger.debug("Input resolved: %r", buffer)
        for step, op in enumerate(operations, 1):
            buffer = apply_operation(op, buffer)
            logger.debug("Step %d/%d %s -> %r", step, len(operations), op.name, buffer)

        self._image = buffer
        self.state = PipelineState.RESOLVED
        return self

    def get_image(self) -> PixelBuffer | None:
        """
        Take the final buffer.

        Returns:
            The buffer on the first call after apply_all(); None otherwise
        """
        if self.state != PipelineState.RESOLVED:
            return None
        image, self._image = self._image, None
        self.state = PipelineState.CONSUMED
        return image

    def __len__(self) -> int:
        return len(self.operations)

    @property
    def total_operations(self) -> int:
        """Operations still to run, the input's own operations included."""
        own = len(self.image_input.operations) if self.image_input is not None else 0
        return own + len(self.operations)

    def __repr__(self) -> str:
        return f"Pipeline(state={self.state.value}, operations={len(self.operations)})"


def run(image_input: ImageInput, operations: list[Operation] | None = None) -> PixelBuffer:
    """Build a pipeline, apply it and return the final buffer."""
    return Pipeline(image_input, operations).apply_all().get_image()
