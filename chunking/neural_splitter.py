"""
Neural sliding-window text splitting.

A BERT-style token classifier scores every token as "a new segment starts
here". The strategy slides a fixed window over the token stream, accepts
boundaries whose probability clears the threshold, and forces a split at the
best-scoring position seen so far whenever the budget would otherwise be
exceeded.

Usage:
    strategy = SlidingWindowNeuralSplittingStrategy.from_pretrained(
        tokenizer_name="bert-base-multilingual-cased",
        model_path="models/boundary.onnx",
    )
    offsets = strategy.get_split_offsets(text, max_token_count=300)
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from tokenization import HuggingFaceTokenizer, Tokenizer

from .exceptions import ExternalCallError, InvalidArgumentError
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 255
STRIDE_FACTOR = 1.75


class BoundaryClassifier(ABC):
    """Scores each token of a window as boundary / not boundary."""

    @abstractmethod
    def classify(self, token_ids: Sequence[int]) -> np.ndarray:
        """
        Args:
            token_ids: Window tokens without special tokens

        Returns:
            Logits of shape ``[len(token_ids), 2]``; column 1 is "boundary"
        """


def _wrap_window(token_ids: Sequence[int], cls_token_id: int, sep_token_id: int):
    input_ids = np.array([[cls_token_id, *token_ids, sep_token_id]], dtype=np.int64)
    return {
        "input_ids": input_ids,
        "attention_mask": np.ones_like(input_ids),
        "token_type_ids": np.zeros_like(input_ids),
    }


class OnnxBoundaryClassifier(BoundaryClassifier):
    """
    Boundary classifier running an exported ONNX model.

    ``session`` is an ``onnxruntime.InferenceSession`` (or anything with the
    same ``run`` signature).
    """

    def __init__(self, session, cls_token_id: int, sep_token_id: int):
        self.session = session
        self.cls_token_id = cls_token_id
        self.sep_token_id = sep_token_id

    @classmethod
    def from_model_path(
        cls, model_path: str, cls_token_id: int, sep_token_id: int
    ) -> "OnnxBoundaryClassifier":
        import onnxruntime

        logger.info(f"Loading ONNX boundary model: {model_path}")
        session = onnxruntime.InferenceSession(
            model_path, providers=["CPUExecutionProvider"]
        )
        return cls(session, cls_token_id, sep_token_id)

    def classify(self, token_ids: Sequence[int]) -> np.ndarray:
        inputs = _wrap_window(token_ids, self.cls_token_id, self.sep_token_id)
        try:
            outputs = self.session.run(None, inputs)
        except Exception as e:
            logger.error(f"Boundary inference failed: {e}")
            raise ExternalCallError("Boundary inference failed.") from e
        logits = np.asarray(outputs[0])
        return logits[0, 1:-1, :]


class TransformersBoundaryClassifier(BoundaryClassifier):
    """Boundary classifier using a HuggingFace token-classification model."""

    def __init__(self, model_name: str, model=None, tokenizer=None):
        self.model_name = model_name
        self._tokenizer = tokenizer
        self._model = model

    @property
    def tokenizer(self):
        """Lazy load tokenizer."""
        if self._tokenizer is None:
            from transformers import AutoTokenizer

            self._tokenizer = AutoTokenizer.from_pretrained(self.model_name)
        return self._tokenizer

    @property
    def model(self):
        """Lazy load model."""
        if self._model is None:
            from transformers import AutoModelForTokenClassification

            logger.info(f"Loading boundary model: {self.model_name}")
            self._model = AutoModelForTokenClassification.from_pretrained(
                self.model_name
            )
            self._model.eval()
        return self._model

    def classify(self, token_ids: Sequence[int]) -> np.ndarray:
        import torch

        inputs = _wrap_window(
            token_ids, self.tokenizer.cls_token_id, self.tokenizer.sep_token_id
        )
        try:
            with torch.no_grad():
                outputs = self.model(
                    **{name: torch.from_numpy(value) for name, value in inputs.items()}
                )
        except Exception as e:
            logger.error(f"Boundary inference failed: {e}")
            raise ExternalCallError("Boundary inference failed.") from e
        return outputs.logits[0, 1:-1, :].cpu().numpy()


@dataclass
class _WindowState:
    window_start: int = 0
    last_split: int = 0
    backup_position: Optional[int] = None
    backup_score: float = -math.inf

    def split_at(self, position: int):
        self.last_split = position
        self.window_start = position
        self.backup_position = None
        self.backup_score = -math.inf


class SlidingWindowNeuralSplittingStrategy(TextSplittingStrategy):
    """
    Split text at model-predicted segment boundaries within a token budget.

    The budget is measured in this strategy's own tokenizer.
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        classifier: BoundaryClassifier,
        probability_threshold: float = 0.5,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        if not 0.0 < probability_threshold < 1.0:
            raise InvalidArgumentError(
                f"Probability threshold must be in (0, 1), got {probability_threshold}."
            )
        if window_size < 4:
            raise InvalidArgumentError(
                f"Window size must be at least 4, got {window_size}."
            )
        self.tokenizer = tokenizer
        self.classifier = classifier
        self.probability_threshold = probability_threshold
        self.window_size = window_size
        # Logit difference equivalent of the probability threshold.
        self.logit_threshold = math.log(probability_threshold / (1 - probability_threshold))
        inner = window_size - 2
        self.stride = max(1, round(math.floor(inner / 2) * STRIDE_FACTOR))

    @classmethod
    def from_pretrained(
        cls,
        tokenizer_name: str,
        model_path: str,
        probability_threshold: float = 0.5,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> "SlidingWindowNeuralSplittingStrategy":
        """Build the strategy over an ONNX model and its HuggingFace tokenizer."""
        tokenizer = HuggingFaceTokenizer(tokenizer_name)
        classifier = OnnxBoundaryClassifier.from_model_path(
            model_path, tokenizer.cls_token_id, tokenizer.sep_token_id
        )
        return cls(tokenizer, classifier, probability_threshold, window_size)

    def _score(self, token_ids: Sequence[int]) -> np.ndarray:
        logits = np.asarray(self.classifier.classify(token_ids), dtype=float)
        return logits[:, 1] - logits[:, 0]

    def _update_backup(
        self, state: _WindowState, scores: np.ndarray, start: int, limit: int
    ):
        """Track the best position in ``(last_split, limit]``; first maximum wins."""
        for i in range(1, len(scores)):
            position = start + i
            if position <= state.last_split:
                continue
            if position > limit:
                break
            if scores[i] > state.backup_score:
                state.backup_score = float(scores[i])
                state.backup_position = position

    def _process_window(
        self,
        token_ids: List[int],
        state: _WindowState,
        max_token_count: int,
        splits: List[int],
    ):
        n = len(token_ids)
        start = state.window_start
        end = min(n, start + self.window_size - 2)
        scores = self._score(token_ids[start:end])

        candidates = [
            i for i in range(1, len(scores)) if scores[i] > self.logit_threshold
        ]

        accepted = []
        previous = state.last_split
        for i in candidates:
            position = start + i
            if position - previous > max_token_count:
                break
            accepted.append(position)
            previous = position

        if accepted:
            splits.extend(accepted)
            state.split_at(accepted[-1])
            return

        if candidates:
            absorbed_end = start + candidates[0]
        elif end >= n:
            absorbed_end = n
        else:
            absorbed_end = min(start + self.stride, n)

        limit = state.last_split + max_token_count
        self._update_backup(state, scores, start, limit)

        if absorbed_end - state.last_split <= max_token_count:
            state.window_start = absorbed_end
            return

        if state.backup_position is not None:
            split = state.backup_position
        elif start > state.last_split:
            split = start
        else:
            split = limit
        logger.debug(
            f"Forcing split at token {split} (window {start}-{end}, "
            f"last split {state.last_split})"
        )
        splits.append(split)
        state.split_at(split)

    def get_split_offsets(self, text: str, max_token_count: int) -> List[int]:
        if not text:
            return []
        if max_token_count <= 0:
            raise InvalidArgumentError(
                f"Max token count must be positive, got {max_token_count}."
            )

        token_ids, spans = self.tokenizer.encode_with_offsets(text)
        if not token_ids:
            return [len(text)]

        state = _WindowState()
        splits: List[int] = []
        while state.window_start < len(token_ids):
            self._process_window(token_ids, state, max_token_count, splits)

        offsets = []
        for position in splits:
            offset = spans[position][0]
            if offset > (offsets[-1] if offsets else 0) and offset < len(text):
                offsets.append(offset)
        offsets.append(len(text))
        return offsets
