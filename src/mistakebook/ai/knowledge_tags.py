"""Curriculum knowledge tags offered to the model when it labels a question.

Math tags are grouped by the grade that introduces them (PEP curriculum):
7-9 are middle school, 10-12 high school. The two bands never share a tag.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from .types import Subject

MIDDLE_SCHOOL_GRADES: Tuple[int, ...] = (7, 8, 9)
HIGH_SCHOOL_GRADES: Tuple[int, ...] = (10, 11, 12)
ALL_GRADES: Tuple[int, ...] = MIDDLE_SCHOOL_GRADES + HIGH_SCHOOL_GRADES

MATH_TAGS_BY_GRADE: Mapping[int, Tuple[str, ...]] = {
    7: (
        "有理数",
        "数轴",
        "相反数",
        "绝对值",
        "有理数的运算",
        "整式的加减",
        "一元一次方程",
        "几何图形初步",
        "直线、射线、线段",
        "角",
        "相交线与平行线",
        "实数",
        "平面直角坐标系",
        "二元一次方程组",
        "不等式与不等式组",
        "数据的收集、整理与描述",
    ),
    8: (
        "三角形",
        "全等三角形",
        "轴对称",
        "整式的乘法与因式分解",
        "分式",
        "二次根式",
        "勾股定理",
        "平行四边形",
        "一次函数",
        "数据的分析",
    ),
    9: (
        "一元二次方程",
        "二次函数",
        "旋转",
        "圆",
        "概率初步",
        "反比例函数",
        "相似",
        "锐角三角函数",
        "投影与视图",
    ),
    10: (
        "集合",
        "常用逻辑用语",
        "一元二次函数、方程和不等式",
        "函数的概念与性质",
        "幂函数",
        "指数函数",
        "对数函数",
        "三角函数",
        "三角恒等变换",
        "平面向量",
        "复数",
        "立体几何初步",
        "统计",
        "概率",
    ),
    11: (
        "空间向量与立体几何",
        "直线和圆的方程",
        "圆锥曲线的方程",
        "椭圆",
        "双曲线",
        "抛物线",
        "数列",
        "等差数列",
        "等比数列",
        "导数及其应用",
    ),
    12: (
        "计数原理",
        "排列与组合",
        "二项式定理",
        "随机变量及其分布",
        "成对数据的统计分析",
        "数学建模",
    ),
}

SUBJECT_TAGS: Mapping[Subject, Tuple[str, ...]] = {
    Subject.PHYSICS: (
        "力学",
        "电学",
        "光学",
        "热学",
        "声学",
        "磁学",
        "欧姆定律",
        "浮力",
        "压强",
        "功和能",
        "杠杆原理",
        "滑轮",
        "电功率",
        "串并联电路",
        "电磁感应",
        "凸透镜成像",
        "光的反射",
        "光的折射",
        "机械运动",
        "牛顿定律",
    ),
    Subject.CHEMISTRY: (
        "化学方程式",
        "氧化还原反应",
        "酸碱盐",
        "有机化学",
        "无机化学",
        "元素周期表",
        "化学键",
        "溶液",
        "溶解度",
        "酸碱中和",
        "金属活动性",
        "燃烧",
        "化学计算",
        "气体制备",
        "物质分类",
    ),
    Subject.BIOLOGY: (
        "细胞",
        "遗传与变异",
        "生物的进化",
        "光合作用",
        "呼吸作用",
        "生态系统",
        "人体生理",
        "植物的结构",
        "微生物",
        "基因工程",
    ),
    Subject.ENGLISH: (
        "语法",
        "词汇",
        "阅读理解",
        "完形填空",
        "写作",
        "听力",
        "翻译",
        "时态",
        "从句",
        "冠词",
        "介词",
        "动词短语",
        "固定搭配",
    ),
    Subject.CHINESE: (
        "字音字形",
        "词语运用",
        "病句修改",
        "古诗词鉴赏",
        "文言文阅读",
        "现代文阅读",
        "名著阅读",
        "修辞手法",
        "作文",
    ),
    Subject.HISTORY: (
        "中国古代史",
        "中国近代史",
        "中国现代史",
        "世界古代史",
        "世界近代史",
        "世界现代史",
        "史料分析",
    ),
    Subject.GEOGRAPHY: (
        "地球与地图",
        "气候",
        "地形地貌",
        "水文",
        "人口与城市",
        "农业",
        "工业",
        "区域地理",
        "自然资源",
    ),
    Subject.POLITICS: (
        "道德与法治",
        "宪法",
        "经济生活",
        "政治生活",
        "文化生活",
        "哲学",
        "国情教育",
    ),
}

# Shorter lists shown together when the subject is not known up front.
PREVIEW_TAGS: Mapping[Subject, Tuple[str, ...]] = {
    Subject.PHYSICS: (
        "力学",
        "电学",
        "光学",
        "热学",
        "欧姆定律",
        "浮力",
        "压强",
        "功和能",
    ),
    Subject.CHEMISTRY: (
        "化学方程式",
        "氧化还原反应",
        "酸碱盐",
        "有机化学",
        "无机化学",
    ),
    Subject.ENGLISH: (
        "语法",
        "词汇",
        "阅读理解",
        "完形填空",
        "写作",
        "听力",
        "翻译",
    ),
}


def get_math_tags_by_grade(grade: int) -> List[str]:
    """Tags introduced at exactly ``grade``."""
    if grade not in MATH_TAGS_BY_GRADE:
        raise ValueError(f"Unsupported grade: {grade!r} (expected one of {ALL_GRADES})")
    return list(MATH_TAGS_BY_GRADE[grade])


def get_math_tags_for_grade(grade: Optional[int]) -> List[str]:
    """Cumulative math tags for a student in ``grade``.

    Grade 8 sees grade 7 and 8 tags, grade 11 sees grade 10 and 11 tags. High
    school never includes middle school tags. ``None`` returns every grade.
    """
    if grade is None:
        levels = ALL_GRADES
    elif grade in MIDDLE_SCHOOL_GRADES:
        levels = tuple(g for g in MIDDLE_SCHOOL_GRADES if g <= grade)
    elif grade in HIGH_SCHOOL_GRADES:
        levels = tuple(g for g in HIGH_SCHOOL_GRADES if g <= grade)
    else:
        raise ValueError(f"Unsupported grade: {grade!r} (expected one of {ALL_GRADES})")

    tags: List[str] = []
    for level in levels:
        tags.extend(MATH_TAGS_BY_GRADE[level])
    return tags


def get_subject_tags(subject: Subject) -> List[str]:
    return list(SUBJECT_TAGS.get(subject, ()))


def quote_tags(tags: List[str]) -> str:
    """Render tags as ``"a", "b", "c"`` for inclusion in a prompt."""
    return ", ".join(f'"{tag}"' for tag in tags)
