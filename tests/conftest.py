import copy
import sys
import os
import pytest
sys.path.append(os.path.dirname(__file__))

from sample_quiz import QUIZ_DOCUMENT, load_sample


@pytest.fixture
def quiz_document():
    return copy.deepcopy(QUIZ_DOCUMENT)


@pytest.fixture
def sample_quiz():
    return load_sample()
