import io
import unittest
import warnings

import pandas as pd

from btp.errors import DegenerateInputWarning, InsufficientDataError, UnsupportedFileError
from btp.schemas import EstimationRequest, EstimatorOptions
from btp.store import default_store, sample_projects
from service.estimate_lib import (
    OUTPUT_COLUMNS,
    estimate_requests_df,
    estimate_with_store,
    import_file,
    import_text,
)


class TestEstimateWithStore(unittest.TestCase):
    def test_uses_current_snapshot(self):
        store = default_store()
        request = EstimationRequest(project_type="entrepôt", surface_area=500)
        self.assertTrue(estimate_with_store(request, store).fallback)

        import_text(store, "type,surface,cout_materiaux\nentrepôt,400,60000000\n")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DegenerateInputWarning)
            result = estimate_with_store(request, store)
        self.assertFalse(result.fallback)
        self.assertEqual(result.materials_cost_estimate, 75_000_000)

    def test_empty_store_raises(self):
        with self.assertRaises(InsufficientDataError):
            estimate_with_store(
                EstimationRequest(project_type="commercial", surface_area=10),
                default_store(seed=False),
            )


class TestImport(unittest.TestCase):
    def test_import_text_reports_added_and_total(self):
        store = default_store()
        added, total = import_text(store, "type,surface\ncommercial,250\n,0\n")
        self.assertEqual((added, total), (1, 6))

    def test_import_file_from_upload_like_object(self):
        store = default_store(seed=False)
        upload = io.BytesIO(b"type,surface,ouvriers\nindustriel,900,18\n")
        upload.name = "export.csv"
        self.assertEqual(import_file(store, upload), (1, 1))

    def test_import_file_rejects_unknown_extension(self):
        with self.assertRaises(UnsupportedFileError):
            import_file(default_store(), b"", "export.json")


class TestEstimateRequestsDf(unittest.TestCase):
    def test_batch_columns_and_skipped_rows(self):
        df_in = pd.DataFrame(
            {
                "Type": ["commercial", "", "industriel", "résidentiel"],
                "Surface": [400, 100, 1000, -5],
                "Ouvriers": [12, 3, 25, 4],
            }
        )
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DegenerateInputWarning)
            df_out = estimate_requests_df(df_in, sample_projects(), EstimatorOptions.rich())

        self.assertEqual(list(df_out.columns[:3]), ["Type", "Surface", "Ouvriers"])
        for col in OUTPUT_COLUMNS + ["recommendations"]:
            self.assertIn(col, df_out.columns)

        self.assertEqual(df_out.loc[0, "materials_cost_estimate"], 67_500_000)
        self.assertTrue(pd.isna(df_out.loc[1, "total_cost"]))
        self.assertFalse(pd.isna(df_out.loc[2, "total_cost"]))
        # negative surface fails validation
        self.assertTrue(pd.isna(df_out.loc[3, "total_cost"]))
        self.assertEqual(df_out.loc[3, "recommendations"], "")

    def test_unknown_type_is_flagged_as_fallback(self):
        df_in = pd.DataFrame({"project_type": ["hangar"], "surface_area": [300]})
        df_out = estimate_requests_df(df_in, sample_projects())
        self.assertTrue(bool(df_out.loc[0, "fallback"]))
        self.assertEqual(df_out.loc[0, "delay_risk_percent"], 25)


if __name__ == "__main__":
    unittest.main()
