from agents.status_agent import StatusAgent


def test_default_bands():
	agent = StatusAgent(low_below=200, medium_below=500)
	assert agent.classify(150) == "low"
	assert agent.classify(200) == "medium"
	assert agent.classify(499) == "medium"
	assert agent.classify(500) == "high"
	assert agent.classify(150, {"high": 0, "medium": 0, "low": 0}) == "low"


def test_custom_thresholds():
	agent = StatusAgent()
	thresholds = {"high": 100, "medium": 50, "low": 10}
	assert agent.classify(100, thresholds) == "high"
	assert agent.classify(60, thresholds) == "medium"
	assert agent.classify(10, thresholds) == "low"
	assert agent.classify(5, thresholds) == "critical"
	assert agent.classify(20, {"low": 10}) == "low"


def test_summarize_and_annotate():
	agent = StatusAgent(low_below=200, medium_below=500)
	stocks = [
		{"_id": "a", "category": "Cogged", "subcategory": "Ax", "quantity": 100},
		{"_id": "b", "category": "Cogged", "subcategory": "Bx", "quantity": 300},
		{"_id": "c", "category": "Timing", "subcategory": "88ZA19", "quantity": 800, "status": {"high": 1000, "medium": 500, "low": 100}},
	]
	summary = agent.summarize(stocks)
	assert summary.total_stock == 1200
	assert summary.categories == ["Cogged", "Timing"]
	assert summary.subcategories == ["Ax", "Bx", "88ZA19"]
	assert (summary.low_stock, summary.medium_stock, summary.high_stock) == (1, 1, 1)

	rows = agent.annotate(stocks)
	assert [r["status"] for r in rows] == ["low", "medium", "medium"]
	assert rows[0]["id"] == "a"
