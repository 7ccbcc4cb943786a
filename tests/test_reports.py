"""
Testes das saídas: relatório texto, dashboard HTML, CSVs e gráficos.
"""
from datetime import datetime

import pandas as pd

from agroclima_ceara.explain.dashboard import render_dashboard
from agroclima_ceara.explain.report_generator import fmt, generate_report, pct
from agroclima_ceara.exports import export_climate_csvs
from agroclima_ceara.pipeline import analyze
from agroclima_ceara.schemas.records import CropProfile
from agroclima_ceara.visualization import (
    plot_monthly_precipitation,
    plot_monthly_temperature,
    plot_suitability_heatmap,
)

GENERATED_AT = datetime(2025, 3, 1, 12, 0, 0)


class TestFormatting:
    def test_fmt(self):
        assert fmt(31.26) == "31.3"
        assert fmt(float("nan")) == "N/D"
        assert fmt(None) == "N/D"

    def test_pct(self):
        assert pct(0.6) == "60%"
        assert pct(float("nan")) == "N/D"


class TestTextReport:
    def test_sections(self, analysis):
        text = generate_report(analysis, generated_at=GENERATED_AT)

        assert "Data de geração: 01/03/2025 12:00:00" in text
        assert "ESTATÍSTICAS CLIMÁTICAS POR REGIÃO:" in text
        assert "ÍNDICE DE ADEQUABILIDADE POR CULTURA E REGIÃO:" in text
        assert "MELHORES PERÍODOS DE PLANTIO:" in text
        assert "RECOMENDAÇÕES ESPECÍFICAS:" in text
        assert "PREVISÃO PARA OS PRÓXIMOS 10 DIAS:" in text

    def test_windows_and_missing_pairs(self, analysis):
        text = generate_report(analysis, generated_at=GENERATED_AT)
        assert "  - Mandioca: Jan (adequabilidade média: 60%)" in text
        assert "  - Feijão Caupi: Sem períodos adequados identificados" in text

    def test_forecast_preview_limited(self, analysis):
        text = generate_report(analysis, generated_at=GENERATED_AT, preview_days=5)
        assert "01/03:" in text
        assert "05/03:" in text
        assert "06/03:" not in text

    def test_no_window_message(self, observations, crops):
        text = generate_report(analyze(observations, [], crops, threshold=0.99), generated_at=GENERATED_AT)
        assert "Não foram identificados períodos adequados com base nos critérios definidos." in text
        assert "Previsão indisponível." in text

    def test_without_data(self, crops):
        text = generate_report(analyze([], [], crops), generated_at=GENERATED_AT)
        assert "Sem dados climáticos disponíveis." in text
        assert "FIM DO RELATÓRIO" in text


class TestDashboard:
    def test_tables(self, analysis):
        page = render_dashboard(analysis, generated_at=GENERATED_AT)
        assert page.startswith("<!DOCTYPE html>")
        assert "<th>Região</th>" in page
        assert "Litoral" in page and "Sertão" in page
        assert 'src="adequabilidade_culturas.png"' in page

    def test_text_is_escaped(self, observations):
        crop = CropProfile("<b>Milho</b>", 20, 30, 50, 200)
        page = render_dashboard(analyze(observations, [], [crop]), charts=())
        assert "&lt;b&gt;Milho&lt;/b&gt;" in page
        assert "<b>Milho</b>" not in page
        assert "Gráficos não gerados nesta execução." in page


class TestCsvExports:
    def test_writes_every_table(self, analysis, tmp_path):
        written = export_climate_csvs(analysis, tmp_path)
        assert set(written) == {
            "dados_mensais.csv",
            "adequabilidade_detalhada.csv",
            "periodos_recomendados.csv",
            "previsao_proximos_dias.csv",
            "balanco_hidrico.csv",
        }

        monthly = pd.read_csv(written["dados_mensais.csv"])
        assert list(monthly.columns) == ["region", "month", "temp_max_mean", "temp_min_mean", "precip_mean"]
        assert len(monthly) == 3

        windows = pd.read_csv(written["periodos_recomendados.csv"])
        assert "Jan" in windows["recommended_months"].tolist()

    def test_water_balance_per_location(self, analysis, tmp_path):
        written = export_climate_csvs(analysis, tmp_path)
        balance = pd.read_csv(written["balanco_hidrico.csv"])
        assert list(balance.columns) == ["region", "location", "month", "precip_total"]
        fortaleza = balance[(balance["location"] == "Fortaleza") & (balance["month"] == 1)]
        assert fortaleza["precip_total"].tolist() == [100.0]
        assert len(balance) == len(analysis.water_balance) == 4

    def test_empty_tables_keep_header(self, crops, tmp_path):
        written = export_climate_csvs(analyze([], [], crops), tmp_path)
        text = written["adequabilidade_detalhada.csv"].read_text(encoding="utf-8")
        assert text.startswith("region,month,crop_name")


class TestCharts:
    def test_png_files(self, analysis, tmp_path):
        plot_monthly_temperature(analysis.monthly, save_path=tmp_path / "t.png")
        plot_monthly_precipitation(analysis.monthly, save_path=tmp_path / "p.png")
        plot_suitability_heatmap(analysis.suitability_summary, save_path=tmp_path / "a.png")
        for name in ("t.png", "p.png", "a.png"):
            assert (tmp_path / name).stat().st_size > 0
