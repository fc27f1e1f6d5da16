import json

import pandas as pd
import pytest
from utils.data_loader import load_history, load_history_csv, load_history_json


def test_load_history_csv(tmp_path):
	p = tmp_path / "history.csv"
	pd.DataFrame({
		'category': ['Cogged'] * 3,
		'subcategory': ['Ax'] * 3,
		'size': ['040', '042', '040'],
		'stockin': [5, 2, None],
		'stockout': [None, None, 1],
		'date': ['2024-01-01', '2024-01-02', '2024-01-03'],
	}).to_csv(p, index=False)
	df = load_history_csv(str(p))
	assert set(['category', 'subcategory', 'date']).issubset(df.columns)
	assert df['size'].tolist() == ['040', '042', '040']


def test_load_history_json(tmp_path):
	p = tmp_path / "history.json"
	p.write_text(json.dumps({"history": [
		{"category": "PK", "subcategory": "4px", "size": "RU40", "stockin": 3, "date": "2024-01-01T00:00:00.000Z"},
	]}), encoding="utf-8")
	df = load_history(p)
	assert len(df) == 1
	assert df.loc[0, 'size'] == 'RU40'


def test_missing_columns_and_unknown_type(tmp_path):
	p = tmp_path / "history.csv"
	pd.DataFrame({'size': ['40'], 'stockin': [1]}).to_csv(p, index=False)
	with pytest.raises(ValueError, match="missing required columns"):
		load_history_csv(p)
	with pytest.raises(ValueError, match="Unsupported file type"):
		load_history(tmp_path / "history.xlsx")


def test_json_must_be_a_list(tmp_path):
	p = tmp_path / "history.json"
	p.write_text(json.dumps({"rows": []}), encoding="utf-8")
	with pytest.raises(ValueError):
		load_history_json(p)
