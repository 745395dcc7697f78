"""Sample Transcribe and Rekognition documents used by the demo evaluation."""
import copy
from typing import Any, Dict

DEMO_INTERVIEW_ID = "demo-interview-001"
DEMO_CANDIDATE_NAME = "김승무원"

_TRANSCRIBE_RESULT = {
    "jobName": "interview-stt-demo",
    "results": {
        "transcripts": [
            {
                "transcript": (
                    "안녕하세요 저는 김승무원이라고 합니다. 승무원이 되는 것이 어릴 때부터의 꿈이었고, "
                    "고객 서비스에 대한 열정이 있어서 지원하게 되었습니다. 안전을 최우선으로 생각하며 "
                    "승객들에게 최고의 서비스를 제공하고 싶습니다."
                )
            }
        ],
        "items": [
            {
                "start_time": "0.0",
                "end_time": "1.5",
                "alternatives": [{"confidence": "0.95", "content": "안녕하세요"}],
                "type": "pronunciation",
            },
            {
                "start_time": "1.6",
                "end_time": "2.8",
                "alternatives": [{"confidence": "0.92", "content": "저는"}],
                "type": "pronunciation",
            },
        ],
    },
}

_REKOGNITION_RESULT = {
    "JobStatus": "SUCCEEDED",
    "Faces": [
        {
            "Timestamp": 1000,
            "Face": {
                "BoundingBox": {"Width": 0.28, "Height": 0.39, "Left": 0.36, "Top": 0.30},
                "AgeRange": {"Low": 22, "High": 28},
                "Smile": {"Value": True, "Confidence": 87.5},
                "Emotions": [
                    {"Type": "HAPPY", "Confidence": 75.2},
                    {"Type": "CONFIDENT", "Confidence": 68.5},
                    {"Type": "CALM", "Confidence": 82.1},
                ],
                "Pose": {"Roll": -1.2, "Yaw": 3.5, "Pitch": -0.8},
                "Quality": {"Brightness": 85.2, "Sharpness": 92.1},
            },
        }
    ],
}

def sample_transcribe_result() -> Dict[str, Any]:
    return copy.deepcopy(_TRANSCRIBE_RESULT)

def sample_rekognition_result() -> Dict[str, Any]:
    return copy.deepcopy(_REKOGNITION_RESULT)
