"""Loader for the label -> example utterances corpus."""

from pathlib import Path

from utils.logger import get_logger

# Used whenever the corpus file is missing, unreadable or empty
DEFAULT_AGENT_EXAMPLES: dict[str, list[str]] = {
    "doc_analyzer": ["解析文档内容", "分析PDF文件", "提取文档摘要"],
    "formula_assistant": ["帮我分析配方", "优化化学配方", "推荐材料比例"],
    "patent_search": ["查询专利用途", "找一下相关专利", "搜索专利信息"],
    "material_scout": ["查询材料属性", "查找化合物信息", "材料数据库检索"],
    "tech_qa": ["智能问答", "帮我翻译一下", "解释一个词的含义"],
}


def default_corpus() -> dict[str, list[str]]:
    """Return a fresh copy of the built-in corpus."""
    return {label: list(examples) for label, examples in DEFAULT_AGENT_EXAMPLES.items()}


def parse_corpus(lines) -> dict[str, list[str]]:
    """
    Parse the flat corpus format.

    A block is a label line followed by example lines. Blocks are separated
    by a blank line; end of input also closes the last block. Labels without
    examples are dropped and repeated labels are merged.

    Args:
        lines: Iterable of text lines

    Returns:
        Mapping of label to example utterances
    """
    examples: dict[str, list[str]] = {}
    current_label: str | None = None
    current_examples: list[str] = []

    def close_block() -> None:
        if current_label is not None and current_examples:
            examples.setdefault(current_label, []).extend(current_examples)

    for raw_line in lines:
        line = raw_line.strip()

        if not line:
            close_block()
            current_label = None
            current_examples = []
            continue

        if current_label is None:
            current_label = line
        else:
            current_examples.append(line)

    close_block()
    return examples


class ExampleCorpusLoader:
    """Reads agent example utterances from a flat UTF-8 text file."""

    def __init__(self, corpus_path: str | Path = "data/agent_examples.txt"):
        self.corpus_path = Path(corpus_path)
        self.logger = get_logger(f"{__name__}.ExampleCorpusLoader")

    def load(self) -> dict[str, list[str]]:
        """
        Load the corpus.

        Returns:
            Mapping of label to examples, or an empty mapping if the source
            is missing, unreadable or malformed
        """
        if not self.corpus_path.exists():
            self.logger.warning(f"Corpus file not found: {self.corpus_path}")
            return {}

        try:
            with open(self.corpus_path, "r", encoding="utf-8") as f:
                examples = parse_corpus(f)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Failed to read corpus file {self.corpus_path}: {e}")
            return {}

        if not examples:
            self.logger.warning(
                f"Corpus file {self.corpus_path} is empty or malformed"
            )
            return {}

        total = sum(len(v) for v in examples.values())
        self.logger.info(
            f"Loaded {total} examples for {len(examples)} labels from {self.corpus_path}"
        )
        return examples
