"""
Testes da análise estatística dos CSVs do FarmTech.
"""
import math
import os
from datetime import datetime

import pandas as pd
import pytest

from agroclima_ceara.errors import DataQualityError, InputFileNotFoundError
from agroclima_ceara.farmtech.loader import extract_timestamp, find_latest_file, load_farm_tables
from agroclima_ceara.farmtech.main import main as farm_main
from agroclima_ceara.farmtech.main import run as farm_run
from agroclima_ceara.farmtech.report import analyze_farm_tables, render_farm_report, summaries_to_frame
from agroclima_ceara.farmtech.statistics import (
    describe_crops,
    describe_fields,
    describe_inputs,
    input_records_from_frame,
    merge_fields_inputs,
    summarize_inputs,
)
from agroclima_ceara.farmtech.synthetic import generate_farm_tables
from agroclima_ceara.schemas.farm import InputRecord


class TestLoader:
    def test_latest_file_by_mtime(self, tmp_path):
        old = tmp_path / "a_20240101_000000_campos.csv"
        new = tmp_path / "b_20230101_000000_campos.csv"
        old.write_text("x\n1\n")
        new.write_text("x\n1\n")
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))
        assert find_latest_file("_campos.csv", tmp_path) == new

    def test_missing_suffix(self, tmp_path):
        with pytest.raises(InputFileNotFoundError, match="_insumos.csv"):
            find_latest_file("_insumos.csv", tmp_path)

    def test_load_requires_all_three(self, farm_dir):
        (farm_dir / "farmtech_20250101_120000_insumos.csv").unlink()
        with pytest.raises(InputFileNotFoundError):
            load_farm_tables(farm_dir)

    def test_missing_column(self, farm_dir, farm_frames):
        farm_frames["campos"].drop(columns=["regiao"]).to_csv(
            farm_dir / "farmtech_20250101_120000_campos.csv", index=False
        )
        with pytest.raises(DataQualityError, match="regiao"):
            load_farm_tables(farm_dir)

    def test_extract_timestamp(self):
        assert extract_timestamp("dados_20250102_081500_culturas.csv") == "20250102_081500"
        now = datetime(2025, 5, 6, 7, 8, 9)
        assert extract_timestamp("culturas.csv", now=now) == "20250506_070809"


class TestDescriptiveStatistics:
    def test_crops(self, farm_frames):
        st = describe_crops(farm_frames["culturas"])
        assert st.count == 2
        assert st.cycle_min_mean == pytest.approx(165.0)
        assert st.precip_max_mean == pytest.approx(1150.0)

    def test_fields(self, farm_frames):
        st = describe_fields(farm_frames["campos"])
        assert st.count == 3
        assert st.area_ha_total == pytest.approx(7.0)
        assert st.area_ha_sd == pytest.approx(1.5275, abs=1e-4)
        assert st.geometry_counts == {"circulo": 1, "retangulo": 2}

    def test_inputs_per_hectare_is_mean_of_ratios(self, farm_frames):
        st = describe_inputs(farm_frames["insumos"])
        # 100/2, 120/1, 400/4
        assert st.fertilizer_per_ha_mean == pytest.approx(90.0)
        assert st.irrigation_per_ha_mean == pytest.approx(20000.0)
        assert st.fertilizer_mean == pytest.approx(620.0 / 3)

    def test_non_numeric_column(self, farm_frames):
        insumos = farm_frames["insumos"].astype({"fertilizante_total_kg": object})
        insumos.loc[1, "fertilizante_total_kg"] = "muito"
        with pytest.raises(DataQualityError, match="fertilizante_total_kg"):
            describe_inputs(insumos)


class TestGroupSummaries:
    def test_by_crop(self, farm_frames):
        summary = summarize_inputs(input_records_from_frame(farm_frames["insumos"]), by="crop")
        assert [s.group for s in summary] == ["Mandioca", "Milho"]
        mandioca = summary[0]
        assert mandioca.num_fields == 2
        assert mandioca.area_total == pytest.approx(6.0)
        assert mandioca.fertilizer_mean == pytest.approx(250.0)
        assert mandioca.fertilizer_per_ha_mean == pytest.approx(75.0)
        assert mandioca.irrigation_per_ha_mean == pytest.approx(15000.0)

    def test_by_region_uses_merged_fields(self, farm_frames):
        merged = merge_fields_inputs(farm_frames["campos"], farm_frames["insumos"])
        assert len(merged) == 3
        summary = summarize_inputs(input_records_from_frame(merged), by="region")
        assert [(s.group, s.num_fields) for s in summary] == [("Litoral", 2), ("Sertão", 1)]

    def test_region_required_for_region_grouping(self, farm_frames):
        with pytest.raises(DataQualityError):
            summarize_inputs(input_records_from_frame(farm_frames["insumos"]), by="region")

    def test_zero_area_with_input_raises(self):
        rec = InputRecord("Ana", "Milho", 0.0, 10.0, 100.0)
        with pytest.raises(DataQualityError, match="Área zero"):
            summarize_inputs([rec])

    def test_missing_values_ignored(self):
        recs = [
            InputRecord("Ana", "Milho", 1.0, float("nan"), 100.0),
            InputRecord("Bia", "Milho", 2.0, 40.0, 100.0),
        ]
        st = summarize_inputs(recs)[0]
        assert st.fertilizer_mean == pytest.approx(40.0)
        assert st.fertilizer_per_ha_mean == pytest.approx(20.0)

    def test_group_without_area_values_is_undefined(self):
        st = summarize_inputs([InputRecord("Ana", "Milho", math.nan, 10.0, 5.0)])[0]
        assert math.isnan(st.area_total)
        assert math.isnan(st.fertilizer_per_ha_mean)
        assert st.fertilizer_mean == pytest.approx(10.0)
        assert st.num_fields == 1

    def test_fields_without_area_values(self, farm_frames):
        campos = farm_frames["campos"].assign(area_hectare=math.nan)
        assert math.isnan(describe_fields(campos).area_ha_total)

    def test_invalid_grouping(self):
        with pytest.raises(ValueError):
            summarize_inputs([], by="produtor")

    def test_summary_frame(self, farm_frames):
        summary = summarize_inputs(input_records_from_frame(farm_frames["insumos"]))
        df = summaries_to_frame(summary, "cultura_plantada")
        assert df.columns[0] == "cultura_plantada"
        assert len(df) == 2


class TestFarmReport:
    def test_report_sections(self, farm_dir):
        analysis = analyze_farm_tables(load_farm_tables(farm_dir))
        text = render_farm_report(analysis, generated_at=datetime(2025, 1, 1, 12, 0, 0))
        for heading in (
            "=== RELATÓRIO DE ANÁLISE FARMTECH ===",
            "Data de geração: 01/01/2025 12:00:00",
            "RESUMO GERAL",
            "ANÁLISE POR CULTURA",
            "ANÁLISE POR REGIÃO",
            "EFICIÊNCIA DE INSUMOS",
        ):
            assert heading in text
        assert "Área total cultivada: 7.00 hectares" in text
        assert "Média geral de fertilizante por hectare: 90.00 kg/ha" in text


class TestFarmCli:
    def test_run_writes_timestamped_outputs(self, farm_dir, tmp_path):
        out = tmp_path / "saida"
        farm_run(["--diretorio", str(farm_dir), "--saida", str(out)])
        ts = "20250101_120000"
        for name in (
            f"analise_farmtech_{ts}.txt",
            f"area_por_cultura_{ts}.png",
            f"area_vs_fertilizantes_{ts}.png",
            f"irrigacao_por_cultura_{ts}.png",
            f"area_vs_irrigacao_{ts}.png",
            f"resumo_por_cultura_{ts}.csv",
            f"resumo_por_regiao_{ts}.csv",
        ):
            assert (out / name).exists(), name

        regions = pd.read_csv(out / f"resumo_por_regiao_{ts}.csv")
        assert regions["regiao"].tolist() == ["Litoral", "Sertão"]

    def test_missing_files_exit(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            farm_main(["--diretorio", str(tmp_path), "--saida", str(tmp_path / "saida")])
        assert exc.value.code == 1
        assert not (tmp_path / "saida").exists()


def test_synthetic_tables_round_trip(tmp_path):
    paths = generate_farm_tables(tmp_path, n_fields=12, seed=1, timestamp="20250101_000000")
    assert set(paths) == {"culturas", "campos", "insumos"}

    analysis = analyze_farm_tables(load_farm_tables(tmp_path))
    assert analysis.fields.count == 12
    assert sum(s.num_fields for s in analysis.by_crop) == 12
    assert sum(s.num_fields for s in analysis.by_region) == 12
