from abc import ABC, abstractmethod


class ComponentExtractor(ABC):
    @abstractmethod
    def analyze(self, filename: str, code: str):
        """Extract the ReactFile of one in-memory source unit."""

    @abstractmethod
    def process_file(self, file_path: str):
        pass

    @abstractmethod
    def write_to_file(self, output_path: str):
        pass

    @abstractmethod
    def extract_all_components(self):
        pass
