"""
Integration Tests for Context Optimization

Runs the full optimizer over a realistic generated module summary at a
range of budgets and checks the properties every result must have.
"""

import pytest

from context_compactor import ContextOptimizer
from context_compactor.token_optimization import (
    MET_BUDGET_NOTE,
    OVER_BUDGET_NOTE,
    select_plan,
)
from context_compactor.token_optimization.models import SECTION_PRIORITIZATION
from context_compactor.token_optimization.optimizer import round_half_up
from context_compactor.token_optimization.tiers import target_reduction

STOCK_SERVICE = """inventory/src/stockService.js
/**
 * Reserves and releases stock for orders.
 * @module stockService
 */
import { Repository } from './repository';

export class StockService {
    constructor(repository) {
        // the repository owns persistence
        this.repository = repository;
    }

    async reserve(sku, quantity) {
        const item = await this.repository.find(sku);
        if (!item) {
            throw new Error(`unknown sku ${sku}`);
        }


        if (item.available < quantity) {
            return false;
        }
        item.available -= quantity;
        await this.repository.save(item);
        return true;
    }
}

export function createStockService(repository) {
    /* factory kept for dependency injection */
    return new StockService(repository);
}"""

PACKAGE_JSON = """inventory/package.json
{"name": "inventory", "version": "2.3.1", "main": "src/index.js", "scripts": {"test": "jest"}}"""

STOCK_TEST = "inventory/test/stockService.test.js\ndescribe('StockService', () => {\n" + "\n".join(
    f"  it('reserves {n} units', async () => {{ expect(await service.reserve('sku-{n}', {n})).toBe(true); }});"
    for n in range(25)
) + "\n});"

MODULE_SUMMARY = (
    "# Project Summary: inventory\n\n"
    "## Overview\n\n"
    "The inventory module tracks available stock per SKU and reserves units for incoming orders.\n\n"
    "## Architecture\n\n"
    "A service layer wraps a repository; the HTTP layer only talks to the service.\n\n"
    "## Files\n\n"
    f"```js\n{STOCK_SERVICE}\n```\n\n"
    f"```json\n{PACKAGE_JSON}\n```\n\n"
    f"```js\n{STOCK_TEST}\n```\n\n\n\n"
    "## Implementation details\n\n"
    + "Reservations are optimistic and retried when the repository reports a version conflict. " * 15
    + "\n"
)

STRATEGY_ORDER = [
    "trimComments",
    "reduceIndentation",
    "removeBlankLines",
    "summarizeFiles",
    "shortenPaths",
    "codeSkeletonization",
    SECTION_PRIORITIZATION,
]


@pytest.fixture(scope="module")
def shared_optimizer() -> ContextOptimizer:
    return ContextOptimizer()


@pytest.fixture(scope="module")
def original_tokens(shared_optimizer) -> int:
    return shared_optimizer.estimate_tokens(MODULE_SUMMARY)


BUDGET_FRACTIONS = [1.5, 1.0, 0.9, 0.7, 0.4, 0.1, 0.0]


class TestBudgetSweep:
    """Properties that hold at every budget."""

    @pytest.mark.parametrize("fraction", BUDGET_FRACTIONS)
    def test_never_grows(self, shared_optimizer, original_tokens, fraction):
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, int(original_tokens * fraction))

        assert result.original_tokens == original_tokens
        assert result.optimized_tokens <= result.original_tokens

    @pytest.mark.parametrize("fraction", BUDGET_FRACTIONS)
    def test_footnote_matches_outcome(self, shared_optimizer, original_tokens, fraction):
        """Test that the footnote reflects whether the budget was met."""
        budget = int(original_tokens * fraction)
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, budget)

        if budget >= original_tokens:
            assert result.context == MODULE_SUMMARY
            return

        if result.within_budget:
            note = MET_BUDGET_NOTE.format(percent=round_half_up(result.reduction_percent))
        else:
            note = OVER_BUDGET_NOTE.format(tokens=result.optimized_tokens - budget)

        assert result.context.endswith(note)
        body = result.context[: -len(note)]
        assert shared_optimizer.estimate_tokens(body) == result.optimized_tokens

    @pytest.mark.parametrize("fraction", BUDGET_FRACTIONS)
    def test_only_tier_strategies_run(self, shared_optimizer, original_tokens, fraction):
        """Test that applied strategies belong to the tier and keep declaration order."""
        budget = int(original_tokens * fraction)
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, budget)
        allowed = set(select_plan(target_reduction(original_tokens, budget)).enabled) | {SECTION_PRIORITIZATION}

        names = result.strategy_names
        assert set(names) <= allowed
        assert names == sorted(names, key=STRATEGY_ORDER.index)
        assert len(names) == len(set(names))

    @pytest.mark.parametrize("fraction", BUDGET_FRACTIONS)
    def test_top_level_headings_survive(self, shared_optimizer, original_tokens, fraction):
        """Test that high-priority sections are never dropped."""
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, int(original_tokens * fraction))

        for heading in ("# Project Summary: inventory", "## Overview", "## Architecture", "## Files"):
            assert heading in result.context


class TestScenarios:
    """End-to-end behavior at characteristic budgets."""

    def test_light_budget_keeps_code_semantics(self, shared_optimizer, original_tokens):
        """Test that a small overshoot is handled without lossy strategies."""
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, original_tokens - 5)

        assert result.within_budget
        assert result.strategy_names == ["trimComments"]
        assert "the repository owns persistence" not in result.context
        assert "Reserves and releases stock for orders." in result.context
        assert "this.repository = repository;" in result.context

    def test_zero_budget(self, shared_optimizer):
        """Test the most aggressive outcome."""
        result = shared_optimizer.optimize_context(MODULE_SUMMARY, 0)

        assert not result.within_budget
        assert result.strategy_names[-1] == SECTION_PRIORITIZATION
        assert "summarizeFiles" in result.strategy_names
        assert "FILE SUMMARY: inventory/test/stockService.test.js" in result.context
        assert "## Implementation details" not in result.context

    def test_deterministic(self, shared_optimizer, original_tokens):
        """Test that repeated runs produce identical results."""
        budget = original_tokens // 3

        first = shared_optimizer.optimize_context(MODULE_SUMMARY, budget)
        second = ContextOptimizer().optimize_context(MODULE_SUMMARY, budget)

        assert first.to_dict() == second.to_dict()

    def test_disabled_summaries(self, shared_optimizer):
        """Test that disabling file summaries keeps every file body."""
        configured = shared_optimizer.configure(strategies={"summarizeFiles": {"enabled": False}})

        result = configured.optimize_context(MODULE_SUMMARY, 0)

        assert "summarizeFiles" not in result.strategy_names
        assert "FILE SUMMARY" not in result.context
        assert shared_optimizer.settings.is_enabled("summarizeFiles")


SMALL_COMMENTED_BLOCK = "\n".join(f"// note {i}" for i in range(10)) + (
    "\nfunction run(a) {\n  return a + 1;\n}\nconst total = run(41);"
)


class TestTierGating:
    """Lossy strategies only run when the needed reduction calls for them."""

    def test_small_overshoot_never_skeletonizes(self, optimizer):
        """Test that a commented block needing under 20% reduction only loses its comments."""
        text = f"# Module\n\n```js\n{SMALL_COMMENTED_BLOCK}\n```\n"
        original = optimizer.estimate_tokens(text)
        budget = original - 1

        result = optimizer.optimize_context(text, budget)

        assert target_reduction(original, budget) < 0.2
        assert "codeSkeletonization" not in select_plan(target_reduction(original, budget)).enabled
        assert result.strategy_names == ["trimComments"]
        assert result.within_budget
        assert "// note" not in result.context
        assert "return a + 1;" in result.context
        assert "const total = run(41);" in result.context

    def test_large_reduction_summarizes_tests_first(self, optimizer, embedded_files_doc):
        """Test that a 60% cut enables the lossy strategies and stubs the test file before config."""
        original = optimizer.estimate_tokens(embedded_files_doc)
        budget = int(original * 0.4)

        result = optimizer.optimize_context(embedded_files_doc, budget)

        enabled = select_plan(target_reduction(original, budget)).enabled
        assert "summarizeFiles" in enabled
        assert "codeSkeletonization" in enabled
        assert result.strategy_names == ["summarizeFiles"]
        assert result.within_budget
        assert "FILE SUMMARY: app/src/server.test.js" in result.context
        assert "FILE SUMMARY: app/package.json" not in result.context
        assert '"version": "1.0.0"' in result.context
