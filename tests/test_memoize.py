"""Tests for the memoization cache and the wired pipeline."""

import asyncio

from prompt_enhancer.core.factory import build_enhancer
from prompt_enhancer.core.memoize import MemoizedEnhancer, cache_key, is_image_payload, memoize


class CountingEnhancer:
    """Async callable returning a distinct answer per invocation."""

    def __init__(self, delay=0.0):
        self.delay = delay
        self.calls = 0

    async def __call__(self, prompt, model, seed, image=None):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"{prompt}-{model}-{seed}-{self.calls}"


class TestCacheKey:
    """Tests for cache_key."""

    def test_positional_key(self):
        assert cache_key("a cat", "flux", 42) == '["a cat", "flux", 42]'

    def test_image_payload_excluded(self, image_payload):
        assert cache_key("a cat", "kontext", 7, image_payload) == cache_key("a cat", "kontext", 7)

    def test_none_keyword_excluded(self):
        assert cache_key("a cat", "flux", 42, image=None) == cache_key("a cat", "flux", 42)

    def test_image_keyword_excluded(self, image_payload):
        assert cache_key("a", "kontext", 1, image=image_payload) == cache_key("a", "kontext", 1)

    def test_non_data_image_reference_kept(self):
        assert cache_key("a", "kontext", 1, "https://img.test/x.png") != cache_key("a", "kontext", 1)

    def test_seed_distinguishes(self):
        assert cache_key("a", "flux", 1) != cache_key("a", "flux", 2)

    def test_trailing_none_dropped(self):
        assert cache_key("a cat", "flux", 42, None) == cache_key("a cat", "flux", 42)

    def test_is_image_payload(self, image_payload):
        assert is_image_payload(image_payload)
        assert not is_image_payload("data:text/plain,hi")
        assert not is_image_payload(42)


class TestMemoizedEnhancer:
    """Tests for MemoizedEnhancer."""

    def test_second_call_served_from_cache(self, run):
        inner = CountingEnhancer()
        cached = MemoizedEnhancer(inner)

        async def scenario():
            return await cached("a", "flux", 1), await cached("a", "flux", 1)

        first, second = run(scenario())
        assert first == second == "a-flux-1-1"
        assert inner.calls == 1
        assert len(cached) == 1

    def test_different_images_share_entry(self, run, image_payload):
        inner = CountingEnhancer()
        cached = memoize(inner)
        other_image = "data:image/png;base64,iVBORw0KGgo="

        async def scenario():
            return (
                await cached("edit", "kontext", 7, image_payload),
                await cached("edit", "kontext", 7, other_image),
            )

        first, second = run(scenario())
        assert first == second
        assert inner.calls == 1

    def test_concurrent_misses_both_invoke(self, run):
        inner = CountingEnhancer(delay=0.05)
        cached = MemoizedEnhancer(inner)

        async def scenario():
            return await asyncio.gather(cached("a", "flux", 1), cached("a", "flux", 1))

        run(scenario())
        assert inner.calls == 2
        assert len(cached) == 1

    def test_call_forms_share_one_entry(self, run):
        inner = CountingEnhancer()
        cached = MemoizedEnhancer(inner)

        async def scenario():
            return [
                await cached("a", "flux", 1, None),
                await cached("a", "flux", 1),
                await cached(prompt="a", model="flux", seed=1),
                await cached("a", model="flux", seed=1, image=None),
            ]

        results = run(scenario())
        assert len(set(results)) == 1
        assert inner.calls == 1
        assert len(cached) == 1

    def test_image_keyword_and_positional_share_entry(self, run, image_payload):
        inner = CountingEnhancer()
        cached = MemoizedEnhancer(inner)

        async def scenario():
            await cached("edit", "kontext", 7, image_payload)
            await cached("edit", "kontext", seed=7, image=image_payload)

        run(scenario())
        assert inner.calls == 1

    def test_bound_key_ignores_argument_style(self):
        cached = MemoizedEnhancer(CountingEnhancer())
        assert cached.key_for("a", "flux", 1, None) == cached.key_for(prompt="a", model="flux", seed=1)
        assert cached.key_for("a", "flux", 1) != cached.key_for("a", "flux", 2)

    def test_has_and_clear(self, run):
        cached = MemoizedEnhancer(CountingEnhancer())
        run(cached("a", "flux", 1))

        assert cached.has("a", "flux", 1)
        assert not cached.has("a", "flux", 2)

        cached.clear()
        assert len(cached) == 0


class TestPipeline:
    """End-to-end tests through build_enhancer with a mocked endpoint."""

    def test_bookstore_scenario(self, config, make_transport, run):
        recorder = make_transport(text="A warm, sunlit bookstore...")
        enhancer = build_enhancer(config, transport=recorder.transport)

        assert run(enhancer("a cozy bookstore", "flux", 42)) == "A warm, sunlit bookstore..."
        assert recorder.bodies[0]["seed"] == 42

    def test_repeat_call_skips_remote(self, config, make_transport, run):
        recorder = make_transport(text=" result ")
        enhancer = build_enhancer(config, transport=recorder.transport)

        async def scenario():
            return await enhancer("a%20cat", "flux", 42), await enhancer("a%20cat", "flux", 42)

        first, second = run(scenario())
        assert first == second == "result"
        assert len(recorder.requests) == 1

    def test_none_image_and_keyword_calls_skip_remote(self, config, make_transport, run):
        recorder = make_transport(text="result")
        enhancer = build_enhancer(config, transport=recorder.transport)

        async def scenario():
            await enhancer("a cat", "flux", 42, None)
            await enhancer("a cat", "flux", 42)
            await enhancer(prompt="a cat", model="flux", seed=42)

        run(scenario())
        assert len(recorder.requests) == 1
        assert len(enhancer) == 1

    def test_prompt_decoded_before_sending(self, config, make_transport, run):
        recorder = make_transport()
        enhancer = build_enhancer(config, transport=recorder.transport)

        run(enhancer("a%20cat", "turbo", 1))

        assert recorder.bodies[0]["messages"][1]["content"][0]["text"] == "Prompt: a cat"

    def test_server_error_falls_back(self, config, make_transport, run):
        recorder = make_transport(status_code=500, text="boom")
        enhancer = build_enhancer(config, transport=recorder.transport)

        assert run(enhancer("a%20cat", "flux", 1)) == "a cat"

    def test_unsupported_editing_skips_remote(self, config, make_transport, run, image_payload):
        recorder = make_transport()
        enhancer = build_enhancer(config, transport=recorder.transport)

        assert run(enhancer("make it blue", "turbo", 1, image_payload)) == "make it blue"
        assert recorder.requests == []

    def test_exposes_engine_and_catalog(self, config):
        enhancer = build_enhancer(config)
        assert enhancer.engine.timeout_seconds == 7.0
        assert "flux" in enhancer.catalog
