"""
Prompt templates for decision tree generation: single source of truth.

Three instruction texts:
- full tree: one call yields the whole nested tree
- first layer: incremental mode, opening question only
- next layer: incremental mode, prior path interpolated

All of them demand bare JSON. Providers do not always comply, which is
why replies still go through the extractor.
"""

from typing import Optional

from .models import GenerationContext

# ─── Full tree ───────────────────────────────────────────────

FULL_TREE_SYSTEM_PROMPT = """你是一个决策助手。根据用户的问题，生成一棵完整的决策树。
决策树的格式必须严格遵循以下JSON结构：
{
  "question": "第一个问题",
  "options": [
    {
      "text": "选项1",
      "next": {
        "question": "下一个问题",
        "options": [
          {"text": "选项A", "result": "最终建议"},
          {"text": "选项B", "result": "最终建议"}
        ]
      }
    },
    {
      "text": "选项2",
      "result": "最终建议"
    }
  ]
}

规则：
1. 决策树深度为2-4层，每个问题包含2-4个选项
2. 每个选项必须包含 next（下一个问题）或 result（最终建议）之一，不能同时包含
3. 问题要针对用户的决策需求，逐步深入
4. 选项要清晰、互斥
5. result 要给出具体、可执行的建议
6. 只返回JSON，不要有其他文字说明"""


# ─── Incremental: first layer ────────────────────────────────

FIRST_LAYER_SYSTEM_PROMPT = """你是一个决策助手。根据用户的问题，生成决策树的第一层。
决策树的格式必须严格遵循以下JSON结构：
{
  "question": "第一个问题",
  "options": [
    {
      "text": "选项1"
    },
    {
      "text": "选项2"
    }
  ]
}

规则：
1. 只生成一层，包含一个问题和2-4个选项
2. 每个选项只需要 text 字段，不需要 next 或 result
3. 问题要针对用户的决策需求
4. 选项要清晰、互斥
5. 只返回JSON，不要有其他文字说明"""


# ─── Incremental: next layer ─────────────────────────────────

NEXT_LAYER_SYSTEM_PROMPT = """你是一个决策助手。根据用户之前的选择，生成决策树的下一层。

用户的原始问题：{question}
之前的选择路径：{previous_choices}
当前问题：{current_question}
用户选择了：{selected_option}

请生成下一层决策节点，格式如下：
{{
  "question": "下一个问题",
  "options": [
    {{
      "text": "选项1"
    }},
    {{
      "text": "选项2",
      "result": "如果这是最终答案，提供结果说明"
    }}
  ]
}}

规则：
1. 只生成一层，包含一个问题和2-4个选项
2. 如果某个选项是最终答案，添加 result 字段
3. 如果还需要继续决策，只提供 text 字段
4. 问题要基于之前的选择，逐步深入
5. 只返回JSON，不要有其他文字说明"""

PATH_SEPARATOR = " → "


def build_system_prompt(question: str, context: Optional[GenerationContext] = None) -> str:
    """Select and fill the instruction template for the requested mode."""
    if context is None:
        return FULL_TREE_SYSTEM_PROMPT
    if context.is_first_level:
        return FIRST_LAYER_SYSTEM_PROMPT
    return NEXT_LAYER_SYSTEM_PROMPT.format(
        question=question,
        previous_choices=PATH_SEPARATOR.join(context.previous_choices),
        current_question=context.current_question,
        selected_option=context.selected_option,
    )
