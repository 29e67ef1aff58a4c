"""
Tests for orchestrator/mock_synthesizer.py: classification, first layers,
the label-keyed transition table and the full demo trees.
"""

import pytest

from treegen.orchestrator.mock_synthesizer import (
    DEFAULT_LAYER,
    FIRST_LAYERS,
    FULL_TREE_LAYERS,
    NEXT_LAYERS,
    Branch,
    Category,
    classify_question,
    generate_first_layer,
    generate_full_tree,
    generate_next_layer,
    synthesize,
)
from treegen.shared.models import (
    BranchingOption, GenerationContext, NextOption, TerminalOption,
)

CAREER_QUESTIONS = ["我应该去哪个城市工作？", "换工作还是留下", "Which CITY should I move to?", "new job offer"]
PURCHASE_QUESTIONS = ["要不要买新电脑", "购置一台相机", "Should I buy a laptop?"]
GENERAL_QUESTIONS = ["要不要学吉他", "", "Should I adopt a cat?"]


class TestClassifyQuestion:
    @pytest.mark.parametrize("question", CAREER_QUESTIONS)
    def test_career(self, question):
        assert classify_question(question) == Category.CAREER

    @pytest.mark.parametrize("question", PURCHASE_QUESTIONS)
    def test_purchase(self, question):
        assert classify_question(question) == Category.PURCHASE

    @pytest.mark.parametrize("question", GENERAL_QUESTIONS)
    def test_general(self, question):
        assert classify_question(question) == Category.GENERAL

    def test_career_checked_before_purchase(self):
        assert classify_question("为了工作要不要买车") == Category.CAREER

    def test_none_is_general(self):
        assert classify_question(None) == Category.GENERAL


class TestFullTree:
    @pytest.mark.parametrize("question", CAREER_QUESTIONS)
    def test_career_root(self, question):
        tree = generate_full_tree(question)
        assert tree.question == "你最看重工作的哪个方面？"
        assert [o.text for o in tree.options] == ["职业发展机会", "生活成本和质量", "气候和环境"]

    @pytest.mark.parametrize("question", PURCHASE_QUESTIONS)
    def test_purchase_root(self, question):
        tree = generate_full_tree(question)
        assert tree.question == "你的预算范围是多少？"
        assert [o.text for o in tree.options] == ["5000元以下", "5000-10000元", "10000元以上"]

    @pytest.mark.parametrize("question", GENERAL_QUESTIONS)
    def test_general_root(self, question):
        tree = generate_full_tree(question)
        assert tree.question == "请先考虑这个问题的优先级"

    def test_deterministic(self):
        assert generate_full_tree("想买手机") == generate_full_tree("想买手机")

    @pytest.mark.parametrize("question", ["去哪个城市工作", "买电脑", "学吉他"])
    def test_depth_three(self, question):
        assert generate_full_tree(question).depth() == 3

    @pytest.mark.parametrize("question", ["去哪个城市工作", "买电脑", "学吉他"])
    def test_every_option_has_next_or_result(self, question):
        def walk(node):
            for opt in node.options:
                assert isinstance(opt, (NextOption, TerminalOption))
                if isinstance(opt, NextOption):
                    walk(opt.next)
        walk(generate_full_tree(question))

    def test_root_options_lead_to_table_layers(self):
        tree = generate_full_tree("去哪个城市工作")
        climate = tree.options[2]
        assert climate.next == NEXT_LAYERS[Branch.CLIMATE]

    def test_deepened_branch(self):
        tree = generate_full_tree("去哪个城市工作")
        growth = tree.options[0].next
        tech = growth.options[0]
        assert tech.text == "互联网科技行业"
        assert isinstance(tech, NextOption)
        assert all(isinstance(o, TerminalOption) for o in tech.next.options)

    def test_serializes_to_wire_shape(self):
        data = generate_full_tree("买电脑").to_dict()
        assert set(data) == {"question", "options"}
        assert "next" in data["options"][0]


class TestFirstLayer:
    def test_career_first_layer_is_text_only(self):
        layer = synthesize("我应该去哪个城市工作？", GenerationContext(is_first_level=True))
        assert layer.question == "你最看重工作的哪个方面？"
        assert all(isinstance(o, BranchingOption) for o in layer.options)
        for opt in layer.to_dict()["options"]:
            assert set(opt) == {"text"}

    def test_purchase_first_layer(self):
        layer = generate_first_layer("想买电脑")
        assert [o.text for o in layer.options] == ["5000元以下", "5000-10000元", "10000元以上"]

    def test_general_first_layer(self):
        layer = generate_first_layer("学吉他")
        assert [o.text for o in layer.options] == [
            "非常紧急，需要立即决定", "不太紧急，可以慢慢考虑", "只是想听听建议",
        ]


class TestTransitions:
    def test_career_growth_layer(self):
        layer = synthesize("q", GenerationContext(selected_option="职业发展机会"))
        assert layer.question == "你更倾向于哪种行业环境？"
        assert len(layer.options) == 3
        assert all(isinstance(o, TerminalOption) for o in layer.options)
        for opt in layer.to_dict()["options"]:
            assert "result" in opt
            assert "next" not in opt

    def test_low_budget_layer(self):
        layer = generate_next_layer("5000元以下")
        assert layer.question == "你主要用途是什么？"
        assert [o.text for o in layer.options] == ["日常办公学习", "娱乐游戏"]
        assert all(o.result for o in layer.options)

    def test_unknown_label_returns_default(self):
        layer = synthesize("q", GenerationContext(selected_option="完全不相关的选项"))
        assert layer == DEFAULT_LAYER
        assert layer.options[0].text == "重新开始"
        assert layer.options[0].result

    def test_empty_label_returns_default(self):
        assert generate_next_layer("") == DEFAULT_LAYER

    def test_incremental_layers_are_one_level(self):
        for layer in NEXT_LAYERS.values():
            assert layer.depth() == 1


class TestTableConsistency:
    def test_every_first_layer_label_has_a_transition(self):
        for _, branches in FIRST_LAYERS.values():
            for branch in branches:
                assert branch in NEXT_LAYERS

    def test_every_branch_is_reachable_from_a_first_layer(self):
        used = {b for _, branches in FIRST_LAYERS.values() for b in branches}
        assert used == set(Branch)

    def test_first_layer_text_round_trips_through_table(self):
        for category in Category:
            layer = generate_first_layer({
                Category.CAREER: "工作",
                Category.PURCHASE: "买",
                Category.GENERAL: "其他",
            }[category])
            for opt in layer.options:
                assert generate_next_layer(opt.text) is not DEFAULT_LAYER

    def test_full_tree_layers_only_deepen_known_branches(self):
        assert set(FULL_TREE_LAYERS) <= set(Branch)

    def test_option_labels_unique_within_layer(self):
        for layer in list(NEXT_LAYERS.values()) + list(FULL_TREE_LAYERS.values()):
            texts = [o.text for o in layer.options]
            assert len(texts) == len(set(texts))
