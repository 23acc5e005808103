"""Tests for configuration and dataset loading."""

from pathlib import Path

import pytest

from shared.exceptions import ConfigError
from utils.config_loader import AppConfig, ConfigLoader
from utils.data_loader import LabeledQueryLoader

PROJECT_ROOT = Path(__file__).parent.parent


def write_config(tmp_path, text):
    path = tmp_path / "router_config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestConfigLoader:
    def test_bundled_config_is_valid(self):
        loader = ConfigLoader(PROJECT_ROOT / "config" / "router_config.yaml")
        config = loader.load_config()

        assert loader.validate_config(config) is True
        assert config.routing.threshold == 0.5
        assert config.routing.top_k == 5
        assert config.routing.fallback_label == "fallback_agent"
        assert config.vector_store.path == "agent_embeddings.db"

    def test_partial_config_uses_defaults(self, tmp_path):
        path = write_config(
            tmp_path,
            """
routing:
  threshold: 0.7
embedding:
  type: huggingface
  model: sentence-transformers/all-MiniLM-L6-v2
""",
        )
        config = ConfigLoader(path).load_config()

        assert config.routing.threshold == 0.7
        assert config.routing.top_k == 5
        assert config.embedding.type == "huggingface"
        assert config.embedding.timeout == 10.0
        assert config.evaluation.save_results is True
        assert config.logging.level == "INFO"

    def test_empty_file_gives_defaults(self, tmp_path):
        config = ConfigLoader(write_config(tmp_path, "")).load_config()
        assert config == AppConfig.default()

    def test_raw_config_kept(self, tmp_path):
        loader = ConfigLoader(write_config(tmp_path, "routing:\n  top_k: 3\n"))
        loader.load_config()
        assert loader.raw_config == {"routing": {"top_k": 3}}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path / "missing.yaml").load_config()

    def test_invalid_yaml_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(write_config(tmp_path, "routing: [unclosed\n")).load_config()

    def test_non_mapping_root_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(write_config(tmp_path, "- a\n- b\n")).load_config()

    def test_malformed_value_raises(self, tmp_path):
        path = write_config(tmp_path, "routing:\n  top_k: lots\n")
        with pytest.raises(ConfigError):
            ConfigLoader(path).load_config()

    @pytest.mark.parametrize(
        "section, field, value",
        [
            ("embedding", "type", "word2vec"),
            ("embedding", "timeout", 0.0),
            ("routing", "threshold", 1.5),
            ("routing", "threshold", -1.01),
            ("routing", "top_k", 0),
            ("routing", "fallback_label", "  "),
        ],
    )
    def test_validation_rejects(self, section, field, value):
        config = AppConfig.default()
        setattr(getattr(config, section), field, value)

        assert ConfigLoader().validate_config(config) is False

    def test_validation_accepts_negative_threshold(self):
        config = AppConfig.default()
        config.routing.threshold = -1.0
        assert ConfigLoader().validate_config(config) is True


class TestLabeledQueryLoader:
    def test_bundled_dataset(self):
        queries = LabeledQueryLoader(PROJECT_ROOT / "data" / "eval_queries.csv").load()

        assert len(queries) == 6
        assert queries[0].query_id == "1"
        assert queries[-1].text == "随机无关内容12345"
        assert queries[-1].expected_label == "fallback_agent"

    def test_row_index_used_without_id_column(self, tmp_path):
        path = tmp_path / "queries.csv"
        path.write_text(
            "query,expected_label\n解析文档内容,doc_analyzer\n智能问答, tech_qa \n",
            encoding="utf-8",
        )

        queries = LabeledQueryLoader(path).load()

        assert [q.query_id for q in queries] == [0, 1]
        assert queries[1].expected_label == "tech_qa"

    def test_na_like_values_kept_as_text(self, tmp_path):
        path = tmp_path / "queries.csv"
        path.write_text("query,expected_label\nNA,fallback_agent\n", encoding="utf-8")

        assert LabeledQueryLoader(path).load()[0].text == "NA"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            LabeledQueryLoader(tmp_path / "missing.csv").load()

    def test_missing_column_raises(self, tmp_path):
        path = tmp_path / "queries.csv"
        path.write_text("text,label\nhello,x\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            LabeledQueryLoader(path).load()
