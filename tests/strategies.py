"""Hypothesis strategies for property-based testing of klaw-flow types."""

from hypothesis import strategies as st
from klaw_flow import Err, Nothing, Ok, Some

# -----------------------------------------------------------------------------
# Basic value strategies
# -----------------------------------------------------------------------------

integers = st.integers()
texts = st.text(min_size=0, max_size=100)
values = st.one_of(st.none(), integers, texts, st.booleans(), st.lists(integers, max_size=5))

# Exception strategies
exceptions = st.sampled_from([
    ValueError('test'),
    TypeError('test'),
    RuntimeError('test'),
])

# -----------------------------------------------------------------------------
# Container strategies
# -----------------------------------------------------------------------------

somes = integers.map(Some)
options = st.one_of(somes, st.just(Nothing))

oks = integers.map(Ok)
errs = st.one_of(texts, exceptions).map(Err)
results = st.one_of(oks, errs)

# Pure functions usable as mappers
int_functions = st.sampled_from([
    lambda x: x + 1,
    lambda x: x * 2,
    lambda x: -x,
    lambda x: x % 7,
])

# Kleisli arrows int -> Option[int] / Result[int, str]
option_functions = st.sampled_from([
    lambda x: Some(x + 1),
    lambda x: Some(x) if x % 2 == 0 else Nothing,
    lambda _x: Nothing,
])

result_functions = st.sampled_from([
    lambda x: Ok(x * 3),
    lambda x: Ok(x) if x >= 0 else Err('negative'),
    lambda _x: Err('always'),
])
