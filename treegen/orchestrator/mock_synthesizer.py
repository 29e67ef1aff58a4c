"""
Deterministic decision trees for demo mode and provider fallback.
Never performs network I/O.

Incremental mode is a small state machine: the state is the label of the
option the user just picked, and ``NEXT_LAYERS`` maps that label to the
following layer. Labels are ``Branch`` members shared by the first-layer
table, the transition table and the full trees, so renaming a label
renames it everywhere at once. Unknown labels land on ``DEFAULT_LAYER``.
"""

import logging
from enum import Enum
from typing import Optional

from treegen.shared.models import (
    BranchingOption,
    DecisionNode,
    GenerationContext,
    NextOption,
    TerminalOption,
)

logger = logging.getLogger(__name__)


class Category(Enum):
    """Question classes recognised by keyword."""
    CAREER = "career"
    PURCHASE = "purchase"
    GENERAL = "general"


class Branch(str, Enum):
    """First-layer option labels. Each one is a key of NEXT_LAYERS."""
    # Career / city
    CAREER_GROWTH = "职业发展机会"
    COST_OF_LIVING = "生活成本和质量"
    CLIMATE = "气候和环境"
    # Purchase budget
    BUDGET_LOW = "5000元以下"
    BUDGET_MID = "5000-10000元"
    BUDGET_HIGH = "10000元以上"
    # Generic urgency
    URGENT = "非常紧急，需要立即决定"
    NOT_URGENT = "不太紧急，可以慢慢考虑"
    ADVICE_ONLY = "只是想听听建议"


# Checked in order: career before purchase, everything else is GENERAL
CATEGORY_KEYWORDS = (
    (Category.CAREER, ("工作", "城市", "work", "job", "career", "city")),
    (Category.PURCHASE, ("买", "购", "buy", "purchase")),
)


def classify_question(question: str) -> Category:
    lowered = (question or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.GENERAL


# ─── First layers ────────────────────────────────────────────

FIRST_LAYERS = {
    Category.CAREER: (
        "你最看重工作的哪个方面？",
        (Branch.CAREER_GROWTH, Branch.COST_OF_LIVING, Branch.CLIMATE),
    ),
    Category.PURCHASE: (
        "你的预算范围是多少？",
        (Branch.BUDGET_LOW, Branch.BUDGET_MID, Branch.BUDGET_HIGH),
    ),
    Category.GENERAL: (
        "请先考虑这个问题的优先级",
        (Branch.URGENT, Branch.NOT_URGENT, Branch.ADVICE_ONLY),
    ),
}


def _layer(question: str, *options: tuple) -> DecisionNode:
    return DecisionNode(
        question=question,
        options=tuple(TerminalOption(text=text, result=result) for text, result in options),
    )


# ─── Transition table: selected label -> next layer ──────────

NEXT_LAYERS = {
    Branch.CAREER_GROWTH: _layer(
        "你更倾向于哪种行业环境？",
        ("互联网科技行业", "建议选择北京或深圳。北京有更多大型互联网公司总部，深圳则有腾讯等科技巨头，两地都有丰富的职业发展机会。"),
        ("金融行业", "建议选择上海。上海是中国的金融中心，拥有最多的金融机构和相关职位，职业发展空间大。"),
        ("创业环境", "建议选择深圳。深圳的创业氛围浓厚，政策支持力度大，适合有创业想法的人。"),
    ),
    Branch.COST_OF_LIVING: _layer(
        "你的预算范围是？",
        ("预算充足，追求高品质生活", "建议选择上海。上海的生活配套设施完善，国际化程度高，适合追求高品质生活的人群。"),
        ("希望性价比高", "建议选择深圳。相比北京上海，深圳的生活成本相对较低，同时气候宜人，生活质量不错。"),
    ),
    Branch.CLIMATE: _layer(
        "你更喜欢什么样的气候？",
        ("四季分明", "建议选择北京。北京四季分明，春秋季节尤其舒适，适合喜欢季节变化的人。"),
        ("温暖湿润", "建议选择深圳。深圳属于亚热带气候，全年温暖，冬天不冷，适合怕冷的人。"),
    ),
    Branch.BUDGET_LOW: _layer(
        "你主要用途是什么？",
        ("日常办公学习", "建议购买中端笔记本电脑或平板电脑，性价比高，满足基本需求。"),
        ("娱乐游戏", "建议购买游戏主机或中端游戏手机，体验更好。"),
    ),
    Branch.BUDGET_MID: _layer(
        "你更看重什么？",
        ("性能和配置", "建议购买高性能笔记本或台式机，可以满足专业工作和游戏需求。"),
        ("便携性", "建议购买轻薄本或高端平板，方便携带，性能也不错。"),
    ),
    Branch.BUDGET_HIGH: _layer(
        "你的具体需求是？",
        ("专业创作", "建议购买 MacBook Pro 或高端工作站，适合视频剪辑、设计等专业工作。"),
        ("高端游戏", "建议购买旗舰游戏本，配备最新显卡和处理器，畅玩所有游戏。"),
    ),
    Branch.URGENT: _layer(
        "你有足够的信息做决定吗？",
        ("是的，信息充足", "建议根据现有信息快速做出决定，相信你的直觉和经验。"),
        ("不，还需要更多信息", "建议先快速收集关键信息，咨询相关专家或有经验的人，然后做决定。"),
    ),
    Branch.NOT_URGENT: _layer(
        "这个决定的影响范围有多大？",
        ("影响重大，关系到长远发展", "建议充分调研，列出各选项的利弊，必要时咨询专业人士，做出深思熟虑的决定。"),
        ("影响较小，可以调整", "建议先尝试一个方案，根据实际效果再调整，不必过度纠结。"),
    ),
    Branch.ADVICE_ONLY: _layer(
        "你更倾向于哪种决策方式？",
        ("理性分析", "建议列出所有可能的选项，分析每个选项的优缺点，用数据和逻辑做决定。"),
        ("直觉判断", "建议相信你的第一感觉，结合过往经验，快速做出选择。"),
    ),
}

DEFAULT_LAYER = _layer(
    "需要更多信息来帮助你决策",
    ("重新开始", "建议重新思考你的问题，提供更多背景信息。"),
)


# ─── Full trees: the incremental layers plus a deeper third level ──

def _deepen(layer: DecisionNode, option_text: str, sub_layer: DecisionNode) -> DecisionNode:
    """Replace one terminal option of ``layer`` with a branch into ``sub_layer``."""
    options = tuple(
        NextOption(text=opt.text, next=sub_layer) if opt.text == option_text else opt
        for opt in layer.options
    )
    return DecisionNode(question=layer.question, options=options)


FULL_TREE_LAYERS = {
    Branch.CAREER_GROWTH: _deepen(
        NEXT_LAYERS[Branch.CAREER_GROWTH],
        "互联网科技行业",
        _layer(
            "你更看重平台规模还是成长速度？",
            ("大平台，体系完善", "建议选择北京。头部互联网公司总部集中，培训体系和晋升通道成熟。"),
            ("成长快，机会多", "建议选择深圳或杭州。中型科技公司扩张快，承担核心工作的机会更多。"),
        ),
    ),
    Branch.BUDGET_HIGH: _deepen(
        NEXT_LAYERS[Branch.BUDGET_HIGH],
        "专业创作",
        _layer(
            "你习惯使用哪个操作系统？",
            ("macOS", "建议购买 MacBook Pro，专业软件生态完善，屏幕色彩准确。"),
            ("Windows", "建议购买高端移动工作站，配备专业显卡，兼容性更好。"),
        ),
    ),
    Branch.NOT_URGENT: _deepen(
        NEXT_LAYERS[Branch.NOT_URGENT],
        "影响重大，关系到长远发展",
        _layer(
            "身边有可以咨询的有经验的人吗？",
            ("有", "建议先和有经验的人深入交流，再结合自己的调研做出决定。"),
            ("没有", "建议寻找专业咨询服务或行业社群，获取客观意见后再决定。"),
        ),
    ),
}


def generate_first_layer(question: str) -> DecisionNode:
    root_question, branches = FIRST_LAYERS[classify_question(question)]
    return DecisionNode(
        question=root_question,
        options=tuple(BranchingOption(text=branch.value) for branch in branches),
    )


def generate_next_layer(selected_option: str) -> DecisionNode:
    try:
        branch = Branch(selected_option)
    except ValueError:
        logger.debug(f"No mock transition for option {selected_option!r}, using default layer")
        return DEFAULT_LAYER
    return NEXT_LAYERS[branch]


def generate_full_tree(question: str) -> DecisionNode:
    root_question, branches = FIRST_LAYERS[classify_question(question)]
    return DecisionNode(
        question=root_question,
        options=tuple(
            NextOption(
                text=branch.value,
                next=FULL_TREE_LAYERS.get(branch, NEXT_LAYERS[branch]),
            )
            for branch in branches
        ),
    )


def synthesize(question: str, context: Optional[GenerationContext] = None) -> DecisionNode:
    """Mock counterpart of one provider call.

    No context: full tree. First-level context: first layer only.
    Otherwise: the layer that follows ``context.selected_option``.
    """
    if context is None:
        return generate_full_tree(question)
    if context.is_first_level:
        return generate_first_layer(question)
    return generate_next_layer(context.selected_option)
