SOCRATIC_TEMPLATE = (
    "你是一位苏格拉底式导师。学生等级: {grade}, 科目: {subject}。\n"
    "任务: 引导学生思考问题 \"{question}\"。\n"
    "规则: 1. 绝对严禁直接给出答案。 2. 使用{language}。 \n"
    "3. 针对{grade}学生的认知水平进行逻辑拆解。"
)

def language_directive(language) -> str:
    # only "en" switches the tutor to english, everything else stays chinese
    return "英文" if language == "en" else "中文"

def build_socratic_prompt(grade: str, subject: str, question: str, language: str = "zh") -> str:
    return SOCRATIC_TEMPLATE.format(
        grade=grade,
        subject=subject,
        question=question,
        language=language_directive(language),
    )
