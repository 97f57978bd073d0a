"""Prompt templates and the placeholder engine that fills them.

Templates use ``{{name}}`` markers. The tag names the templates ask the model
to emit are the same names :mod:`mistakebook.ai.parsing` extracts, so the two
modules must change together.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from mistakebook import config

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render(template: str, variables: Mapping[str, Optional[str]]) -> str:
    """Replace every ``{{name}}`` in ``template`` with ``variables[name]``.

    Unknown names (and None/empty values) become an empty string. Substitution
    is a single pass: placeholders inside substituted values are left as-is.
    """

    def _sub(match: re.Match) -> str:
        return variables.get(match.group(1)) or ""

    return _PLACEHOLDER.sub(_sub, template)


DEFAULT_ANALYZE_TEMPLATE = """【角色与核心任务 (ROLE AND CORE TASK)】
你是一位经验丰富的跨学科考试分析专家。请准确分析用户提供的考试题目图片，理解其中所有文字、图表和隐含条件，并给出完整、结构化的专业解答。

{{language_instruction}}

【输出格式要求 (OUTPUT REQUIREMENTS)】
只能使用下面的自定义标签输出。禁止使用 JSON 或 Markdown 代码块。LaTeX 公式中的反斜杠不要二次转义（写 "\\frac"，不要写 "\\\\frac"）。

<question_text>
题目的完整文本。使用 Markdown，数学公式使用 LaTeX（行内 $...$，块级 $$...$$）。
</question_text>

<answer_text>
正确答案。使用 Markdown 和 LaTeX。
</answer_text>

<analysis>
详细的分步解析。
* 直接使用标准 LaTeX 符号（如 $\\frac{1}{2}$），不要做 JSON 转义。
</analysis>

<subject>
学科，必须是以下之一："数学", "物理", "化学", "生物", "英语", "语文", "历史", "地理", "政治", "其他"。
</subject>

<knowledge_points>
知识点，使用逗号分隔，例如：知识点1, 知识点2, 知识点3
</knowledge_points>

<requires_image>
如果必须看图才能解答（几何图形、函数图像、实验装置图、电路图等），填写 true；仅凭文字即可理解，填写 false。
</requires_image>

【知识点标签列表 (KNOWLEDGE POINT LIST)】
{{knowledge_points_list}}

【标签使用规则 (TAG RULES)】
- 标签必须与题目实际考查的知识点精准匹配。
- 每题最多 5 个标签。

【关键约束 (CRITICAL RULES)】
1. 必须包含上述 6 个标签，不要输出任何开场白或结束语。
2. 内容按纯文本处理，不要转义反斜杠。
3. 如有子问题，请在 question_text 中完整列出。
4. 不要包含任何图片链接或 Markdown 图片语法。

{{provider_hints}}"""


DEFAULT_SIMILAR_TEMPLATE = """You are an expert tutor writing practice problems for middle and high school students.
Write a NEW practice problem based on the original question and knowledge points below.

DIFFICULTY LEVEL: {{difficulty_level}}
{{difficulty_instruction}}

{{language_instruction}}

Original Question: "{{original_question}}"
Knowledge Points: {{knowledge_points}}

【输出格式要求 (OUTPUT REQUIREMENTS)】
只能使用下面的自定义标签输出，不要包含任何其他文字。禁止使用 JSON 或 Markdown 代码块。

<question_text>
新题目的完整文本（选择题请包含选项）。
</question_text>

<answer_text>
新题目的正确答案。
</answer_text>

<analysis>
新题目的详细解析。
* 直接使用标准 LaTeX 符号（如 $\\frac{1}{2}$），不要做 JSON 转义。
</analysis>

<subject>
学科（通常与原题一致），必须是以下之一："数学", "物理", "化学", "生物", "英语", "语文", "历史", "地理", "政治", "其他"。
</subject>

<knowledge_points>
新题目考查的知识点，使用逗号分隔。
</knowledge_points>

<requires_image>
新题目是否必须配图才能解答，填写 true 或 false。
</requires_image>

【关键约束 (CRITICAL RULES)】
1. 必须包含上述 6 个标签。
2. 内容按纯文本处理，不要转义反斜杠。

{{provider_hints}}"""


DEFAULT_REANSWER_TEMPLATE = """【角色与核心任务 (ROLE AND CORE TASK)】
你是一位经验丰富的教师。用户已经提供了一道校正后的题目，请为它给出正确答案和详细解析。

{{language_instruction}}

【题目内容 (QUESTION)】
{{question_text}}

【学科提示 (SUBJECT HINT)】
{{subject_hint}}

【输出格式要求 (OUTPUT REQUIREMENTS)】
只能使用下面的自定义标签输出，不要包含任何其他文字。禁止使用 JSON 或 Markdown 代码块。

<answer_text>
正确答案。使用 Markdown 和 LaTeX。
</answer_text>

<analysis>
详细的分步解析，清晰完整，适合学生理解。
* 直接使用标准 LaTeX 符号（如 $\\frac{1}{2}$），不要做 JSON 转义。
</analysis>

<knowledge_points>
知识点，使用逗号分隔，例如：知识点1, 知识点2, 知识点3
</knowledge_points>

【关键约束 (CRITICAL RULES)】
1. 必须包含上述 3 个标签，不要输出其他内容。
2. 内容按纯文本处理，不要转义反斜杠。
3. 不要修改或复述题目，只给出答案和解析。

{{provider_hints}}"""


@dataclass(frozen=True)
class PromptTemplates:
    """Per-flow template overrides. ``None`` (or empty) means use the default."""

    analyze: Optional[str] = None
    similar: Optional[str] = None
    reanswer: Optional[str] = None

    def analyze_template(self) -> str:
        return self.analyze or DEFAULT_ANALYZE_TEMPLATE

    def similar_template(self) -> str:
        return self.similar or DEFAULT_SIMILAR_TEMPLATE

    def reanswer_template(self) -> str:
        return self.reanswer or DEFAULT_REANSWER_TEMPLATE

    @classmethod
    def from_file(cls, path: str) -> "PromptTemplates":
        if not os.path.isfile(path):
            raise ValueError(f"Prompt template file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Prompt template file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Prompt template file must contain a JSON object")
        return cls(
            analyze=data.get("analyze") or None,
            similar=data.get("similar") or None,
            reanswer=data.get("reanswer") or None,
        )

    @classmethod
    def from_env(cls) -> "PromptTemplates":
        if not config.PROMPT_TEMPLATES_FILE:
            return cls()
        return cls.from_file(config.PROMPT_TEMPLATES_FILE)
